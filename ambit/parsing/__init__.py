"""
Parsing module — Pluggable source-to-symbol-tree parsers.

- LanguageParser: one parser per language (one operation: parse_file)
- ParserRegistry: extension-based routing
- scan_project: builds a ProjectTree from a directory

Usage:
    from ambit.parsing import default_registry, scan_project

    result = scan_project(Path("."), default_registry())
    tree = result.tree
"""

from .base import LanguageParser, ParseError, ParserRegistry, default_registry
from .python import PythonParser
from .markdown import MarkdownParser
from .scanner import ScanResult, parse_path, scan_project, DEFAULT_EXCLUDE_DIRS

__all__ = [
    'LanguageParser', 'ParseError', 'ParserRegistry', 'default_registry',
    'PythonParser', 'MarkdownParser',
    'ScanResult', 'parse_path', 'scan_project', 'DEFAULT_EXCLUDE_DIRS',
]
