"""
CLI — Command interface

    ambit report --project P [--log FILE ...] [--format text|csv|json] [--agent ID]
    ambit dump   --project P [--log FILE ...] [--agent ID]
    ambit config [get KEY | set KEY VALUE [--user]]

Log files are always given explicitly; the CLI never goes looking for them.
Each command scans the project, replays the logs in order, then prints.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from . import __version__
from .config import Config, ConfigManager
from .ingest.claude import parse_log_file
from .logs import configure_logging
from .output import VALID_FORMATS, dump_tree, get_formatter, get_symbols, safe_print
from .output.text import TextFormatter
from .parsing import default_registry, scan_project
from .session import Session


logger = logging.getLogger(__name__)


# =============================================================================
# Session setup
# =============================================================================

def build_session(project: Path, log_files: List[Path], config: Config) -> Session:
    """Scan the project and replay the given logs into a fresh session."""
    result = scan_project(
        project,
        default_registry(),
        exclude_dirs=config.scan.exclude_dirs,
        max_file_size=config.scan.max_file_size,
    )
    session_id = log_files[-1].stem if log_files else None
    session = Session(result.tree, session_id=session_id)
    session.parse_failures.update(result.failures)

    for log_file in log_files:
        events = parse_log_file(log_file)
        logger.info("Replaying %d event(s) from %s", len(events), log_file)
        session.process_events(events)

    return session


def _load_config(args) -> Config:
    config = ConfigManager(Path(args.project)).load()
    configure_logging(config.logging.level, config.logging.event_log)
    return config


# =============================================================================
# Commands
# =============================================================================

def cmd_report(args) -> int:
    config = _load_config(args)
    format = args.format or config.display.format
    if format not in VALID_FORMATS:
        print(f"Error: Unknown format '{format}'. Valid: {', '.join(VALID_FORMATS)}", file=sys.stderr)
        return 1
    session = build_session(Path(args.project), args.log, config)
    session.agent_filter = args.agent

    if format == "text":
        formatter = TextFormatter(symbols=get_symbols(config.display.symbols))
    else:
        formatter = get_formatter(format)

    safe_print(formatter.format(session.report()), end="")
    return 0


def cmd_dump(args) -> int:
    config = _load_config(args)
    session = build_session(Path(args.project), args.log, config)
    output = dump_tree(
        session.tree,
        session.ledger,
        symbols=get_symbols(config.display.symbols),
        agent_id=args.agent,
    )
    if output:
        safe_print(output)
    else:
        print("No supported files found.")
    return 0


def cmd_config(args) -> int:
    manager = ConfigManager(Path(args.project))

    if args.action == "get":
        if not args.key:
            print("Usage: ambit config get KEY", file=sys.stderr)
            return 2
        value = manager.get(args.key)
        if value is None:
            print(f"Unknown or unset key: {args.key}", file=sys.stderr)
            return 1
        print(value)
        return 0

    if args.action == "set":
        if not args.key or args.value is None:
            print("Usage: ambit config set KEY VALUE", file=sys.stderr)
            return 2
        error = manager.set(args.key, args.value, scope="user" if args.user else "project")
        if error:
            print(f"Error: {error}", file=sys.stderr)
            return 1
        print(f"Set {args.key} = {args.value}")
        return 0

    safe_print(manager.display())
    return 0


COMMANDS: Dict[str, Callable] = {
    "report": cmd_report,
    "dump": cmd_dump,
    "config": cmd_config,
}


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--project', '-p',
        default=os.environ.get("AMBIT_PROJECT_PATH", "."),
        help='Project directory (default: AMBIT_PROJECT_PATH or current)'
    )

    tracking = argparse.ArgumentParser(add_help=False)
    tracking.add_argument('--log', '-l', type=Path, action='append', default=[],
                          metavar='FILE', help='Session log (JSONL); repeat to replay several')
    tracking.add_argument('--agent', '-a', default=None,
                          help='Only count observations by this agent id')

    parser = argparse.ArgumentParser(
        prog="ambit",
        description="Ambit -- Symbol-level coverage of what coding agents have read",
    )
    parser.add_argument('--version', '-V', action='version', version=f'ambit {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    p = subparsers.add_parser('report', parents=[common, tracking], help='Coverage report')
    p.add_argument('--format', '-f', choices=VALID_FORMATS, default=None,
                   help='Output format (default: display.format)')

    subparsers.add_parser('dump', parents=[common, tracking], help='Symbol tree with read depths')

    p = subparsers.add_parser('config', parents=[common], help='View or set configuration')
    p.add_argument('action', nargs='?', choices=['get', 'set'], help='Omit to show all settings')
    p.add_argument('key', nargs='?', help="Dot-separated key (e.g. 'display.format')")
    p.add_argument('value', nargs='?', help='Value for set')
    p.add_argument('--user', action='store_true', help='Write to user config instead of project')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the Ambit CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    project = Path(args.project)
    if not project.is_dir():
        print(f"Error: project directory not found: {project}", file=sys.stderr)
        return 1
    # Logs carry absolute paths, so the tree root must be absolute too
    args.project = project.resolve()

    return COMMANDS[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
