"""
Logging — Diagnostics and the event log

Two streams:
- Diagnostics: every module logs through logging.getLogger(__name__)
  under the "ambit" logger; configure_logging() attaches a stderr handler.
- Event log: one line per processed tool call on the "ambit.events"
  logger, written to a file only when an event_log path is configured.
  It never propagates to the diagnostics stream.

Event line format:
    [2025-01-15T10:30:00Z] agent=abc tool=Read depth=full path=src/lib.py target=- desc="Read src/lib.py"
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .core.events import ToolCall


EVENT_LOGGER_NAME = "ambit.events"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def configure_logging(
    level: Union[str, int] = "WARNING",
    event_log: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the package loggers.

    Args:
        level: Diagnostics level name or number
        event_log: File that receives event lines (None disables it)

    Calling again replaces the handlers installed by a previous call.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger("ambit")
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    event_logger.propagate = False
    event_logger.setLevel(logging.INFO)
    for handler in event_logger.handlers:
        handler.close()
    event_logger.handlers = []

    if event_log:
        path = Path(event_log)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        event_logger.addHandler(file_handler)
    else:
        event_logger.addHandler(logging.NullHandler())


def format_event_line(event: ToolCall) -> str:
    """Render one tool call as an event-log line."""
    description = event.description.replace('"', "'")
    return (
        f"[{event.timestamp or '-'}] agent={event.agent_id} tool={event.tool_name} "
        f"depth={event.read_depth.label} path={event.file_path or '-'} "
        f"target={event.target_display()} desc=\"{description}\""
    )
