"""
Claude session logs — JSONL records to ToolCall events

Each assistant record in a session log may carry several tool_use blocks.
Every block becomes one ToolCall; tools this module does not recognize
become untracked events (UNSEEN depth) so they still show as activity
without touching the ledger.

Depth by tool:
    Read / Edit / Write / NotebookEdit         → full
    Glob, find_file, list_dir                  → name
    Grep, search_for_pattern                   → overview
    get_symbols_overview                       → overview
    find_symbol                                → signature (full with include_body)
    find_referencing_symbols                   → overview (targeted)
    replace_symbol_body, insert_*, rename      → full (targeted)

Read with offset + limit targets lines [offset, offset + limit).

Finding and tailing log files is left to the caller.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import orjson

from ..core.events import ToolCall
from ..core.ledger import ReadDepth
from ..core.symbols import LineRange


logger = logging.getLogger(__name__)

# (file_path, depth, description, target_symbol, target_lines)
_Mapped = Tuple[Optional[str], ReadDepth, str, Optional[str], Optional[LineRange]]

SERENA_PREFIXES = ("mcp__serena__", "mcp__plugin_serena_serena__")


def _str(input: Dict[str, Any], *keys: str) -> Optional[str]:
    """First string value among keys."""
    for key in keys:
        value = input.get(key)
        if isinstance(value, str):
            return value
    return None


def _int(input: Dict[str, Any], key: str) -> Optional[int]:
    value = input.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def short_path(path: str) -> str:
    """Last two path components, for display."""
    return "/".join(Path(path).parts[-2:])


# =============================================================================
# Tool handlers
# =============================================================================

def _read(tool: str, input: Dict[str, Any]) -> Optional[_Mapped]:
    path = _str(input, "file_path", "relative_path")
    if path is None:
        return None
    offset, limit = _int(input, "offset"), _int(input, "limit")
    target_lines = LineRange(offset, offset + limit) if offset is not None and limit is not None else None
    return path, ReadDepth.FULL_BODY, f"Read {short_path(path)}", None, target_lines


def _file_op(verb: str, *keys: str) -> Callable[[str, Dict[str, Any]], Optional[_Mapped]]:
    def handler(tool: str, input: Dict[str, Any]) -> Optional[_Mapped]:
        path = _str(input, *keys)
        if path is None:
            return None
        return path, ReadDepth.FULL_BODY, f"{verb} {short_path(path)}", None, None
    return handler


def _glob(tool: str, input: Dict[str, Any]) -> _Mapped:
    pattern = _str(input, "pattern", "file_mask") or "*"
    path = _str(input, "path", "relative_path")
    return path, ReadDepth.NAME_ONLY, f"Glob {pattern}", None, None


def _search(tool: str, input: Dict[str, Any]) -> _Mapped:
    pattern = _str(input, "pattern", "substring_pattern") or "?"
    path = _str(input, "path", "relative_path")
    return path, ReadDepth.OVERVIEW, f'Search "{pattern}"', None, None


def _overview(tool: str, input: Dict[str, Any]) -> _Mapped:
    path = _str(input, "relative_path")
    return path, ReadDepth.OVERVIEW, f"Overview {path or '?'}", None, None


def _find_symbol(tool: str, input: Dict[str, Any]) -> _Mapped:
    target = _str(input, "name_path_pattern")
    depth = ReadDepth.FULL_BODY if input.get("include_body") is True else ReadDepth.SIGNATURE
    return _str(input, "relative_path"), depth, f"Symbol {target or '?'}", target, None


def _symbol_op(verb: str, depth: ReadDepth) -> Callable[[str, Dict[str, Any]], _Mapped]:
    def handler(tool: str, input: Dict[str, Any]) -> _Mapped:
        target = _str(input, "name_path")
        return _str(input, "relative_path"), depth, f"{verb} {target or '?'}", target, None
    return handler


def _serena(*names: str) -> List[str]:
    return [f"{prefix}{name}" for prefix in SERENA_PREFIXES for name in names]


TOOL_HANDLERS: Dict[str, Callable[[str, Dict[str, Any]], Optional[_Mapped]]] = {}


def _register(names: List[str], handler) -> None:
    for name in names:
        TOOL_HANDLERS[name] = handler


_register(["Read", "mcp__acp__Read", "mcp__plugin_serena_serena__read_file"], _read)
_register(["Edit", "mcp__acp__Edit", "mcp__plugin_serena_serena__replace_content"],
          _file_op("Edit", "file_path", "relative_path"))
_register(["Write", "mcp__acp__Write", "mcp__plugin_serena_serena__create_text_file"],
          _file_op("Write", "file_path", "relative_path"))
_register(["NotebookEdit"], _file_op("NotebookEdit", "notebook_path"))
_register(["Glob"] + _serena("find_file", "list_dir"), _glob)
_register(["Grep"] + _serena("search_for_pattern"), _search)
_register(_serena("get_symbols_overview"), _overview)
_register(_serena("find_symbol"), _find_symbol)
_register(_serena("find_referencing_symbols"), _symbol_op("FindRefs", ReadDepth.OVERVIEW))
_register(_serena("replace_symbol_body"), _symbol_op("ReplaceSymbol", ReadDepth.FULL_BODY))
_register(_serena("insert_after_symbol"), _symbol_op("InsertAfter", ReadDepth.FULL_BODY))
_register(_serena("insert_before_symbol"), _symbol_op("InsertBefore", ReadDepth.FULL_BODY))
_register(_serena("rename_symbol"), _symbol_op("Rename", ReadDepth.FULL_BODY))


# =============================================================================
# Parsing
# =============================================================================

def map_tool_call(
    tool_name: str,
    input: Any,
    agent_id: str,
    timestamp: str,
) -> Optional[ToolCall]:
    """
    Map a tool invocation to a ToolCall with the appropriate read depth.

    Returns:
        ToolCall, or None if the tool is unknown or lacks a required path
    """
    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        return None
    mapped = handler(tool_name, input if isinstance(input, dict) else {})
    if mapped is None:
        return None

    file_path, depth, description, target_symbol, target_lines = mapped
    return ToolCall(
        agent_id=agent_id,
        tool_name=tool_name,
        read_depth=depth,
        file_path=file_path,
        description=description,
        timestamp=timestamp,
        target_symbol=target_symbol,
        target_lines=target_lines,
    )


def parse_jsonl_line(line: str, default_agent_id: str) -> List[ToolCall]:
    """
    Parse one session-log line into tool-call events.

    Only assistant records are considered. Malformed lines yield nothing.
    """
    line = line.strip()
    if not line:
        return []
    try:
        record = orjson.loads(line)
    except orjson.JSONDecodeError:
        return []

    if not isinstance(record, dict) or record.get("type") != "assistant":
        return []

    agent_id = record.get("sessionId")
    if not isinstance(agent_id, str):
        agent_id = default_agent_id
    timestamp = record.get("timestamp")
    if not isinstance(timestamp, str):
        timestamp = ""

    message = record.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list):
        return []

    events = []
    for block in content:
        if not isinstance(block, dict) or block.get("type") != "tool_use":
            continue
        tool_name = block.get("name")
        if not isinstance(tool_name, str):
            continue

        event = map_tool_call(tool_name, block.get("input"), agent_id, timestamp)
        if event is None:
            event = ToolCall(
                agent_id=agent_id,
                tool_name=tool_name,
                read_depth=ReadDepth.UNSEEN,
                description=f"{tool_name} (untracked)",
                timestamp=timestamp,
            )
        events.append(event)

    return events


def parse_log_file(path: Path) -> List[ToolCall]:
    """
    Parse every event in a JSONL session log.

    The file stem is the agent id for records without a sessionId.
    An unreadable file yields no events.
    """
    path = Path(path)
    default_id = path.stem or "unknown"
    events: List[ToolCall] = []
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                events.extend(parse_jsonl_line(line, default_id))
    except OSError as e:
        logger.warning("Could not read log %s: %s", path, e)
        return []
    return events
