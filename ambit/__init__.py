"""
Ambit — Symbol-level coverage of what coding agents have read

Tracks, per symbol, how deeply an agent has observed the code (name,
overview, signature, full body) and flags observations that went stale
when the code changed underneath.

Usage:
    ambit report --project . --log ~/.claude/projects/x/session.jsonl
    ambit dump --project . --log session.jsonl --agent abc123
    ambit config set display.format json
"""

__version__ = "0.1.0"

# Core layer (data)
from .core.symbols import SymbolCategory, LineRange, SymbolNode, FileSymbols, ProjectTree
from .core.ledger import ReadDepth, ContextEntry, ContextLedger
from .core.events import ToolCall

# Tracking layer
from .tracking.matcher import apply_event
from .tracking.coverage import FileCoverageStatus, FileCoverage, CoverageReport
from .tracking.reconcile import ReconcileResult, reconcile_file, reconcile_project

# Parsing and ingest
from .parsing import LanguageParser, ParseError, ParserRegistry, default_registry, scan_project
from .ingest import parse_jsonl_line, parse_log_file

# Session
from .session import Session

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'SymbolCategory', 'LineRange', 'SymbolNode', 'FileSymbols', 'ProjectTree',
    'ReadDepth', 'ContextEntry', 'ContextLedger',
    'ToolCall',
    # Tracking
    'apply_event',
    'FileCoverageStatus', 'FileCoverage', 'CoverageReport',
    'ReconcileResult', 'reconcile_file', 'reconcile_project',
    # Parsing and ingest
    'LanguageParser', 'ParseError', 'ParserRegistry', 'default_registry', 'scan_project',
    'parse_jsonl_line', 'parse_log_file',
    # Session
    'Session',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
