"""
Scanner — Builds a ProjectTree by parsing every supported file

Walks the project directory, skipping hidden and excluded directories,
and hands each supported file to its registered parser. A file that fails
to read or parse is excluded for this round; the failure is logged and
reported, never raised.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..core.symbols import FileSymbols, ProjectTree
from .base import ParseError, ParserRegistry


logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = ("target", "node_modules", "__pycache__", ".venv", "venv", "build", "dist")
DEFAULT_MAX_FILE_SIZE = 300_000  # bytes


@dataclass
class ScanResult:
    """Outcome of a project scan."""
    tree: ProjectTree
    failures: Dict[str, str] = field(default_factory=dict)   # rel path -> reason

    @property
    def ok(self) -> bool:
        return not self.failures


def parse_path(
    path: Path,
    root: Path,
    registry: ParserRegistry,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> FileSymbols:
    """
    Read and parse one file.

    Args:
        path: Absolute (or root-relative) path to the file
        root: Project root; symbol ids use the path relative to it

    Raises:
        ParseError: If the file is unsupported, too large, unreadable or invalid,
            or if the parser fails unexpectedly
    """
    abs_path = path if path.is_absolute() else root / path
    try:
        rel_path = abs_path.relative_to(root)
    except ValueError:
        rel_path = Path(abs_path.name)

    parser = registry.parser_for(abs_path)
    if parser is None:
        raise ParseError(rel_path, "no parser for this file type")

    try:
        if abs_path.stat().st_size > max_file_size:
            raise ParseError(rel_path, f"larger than {max_file_size} bytes")
        source = abs_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ParseError(rel_path, f"unreadable ({e})") from e

    try:
        return parser.parse_file(rel_path, source)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(rel_path, f"{parser.name} parser failed ({type(e).__name__}: {e})") from e


def _iter_candidate_files(root: Path, exclude_dirs: Iterable[str]) -> Iterable[Path]:
    excluded = set(exclude_dirs)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if not d.startswith(".") and d not in excluded
        )
        for filename in sorted(filenames):
            if not filename.startswith("."):
                yield Path(dirpath) / filename


def scan_project(
    root: Path,
    registry: ParserRegistry,
    exclude_dirs: Optional[Iterable[str]] = None,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> ScanResult:
    """
    Parse every supported file under root.

    Args:
        root: Project root directory
        registry: Parsers to use, by extension
        exclude_dirs: Directory names to skip (default: DEFAULT_EXCLUDE_DIRS)
        max_file_size: Skip files larger than this (bytes)

    Returns:
        ScanResult with the tree and any per-file failures
    """
    root = Path(root)
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    tree = ProjectTree(root)
    failures: Dict[str, str] = {}

    for path in _iter_candidate_files(root, exclude_dirs):
        if not registry.is_supported(path):
            continue
        try:
            tree.put(parse_path(path, root, registry, max_file_size))
        except ParseError as e:
            rel = path.relative_to(root).as_posix()
            failures[rel] = str(e)
            logger.warning("Failed to parse %s: %s", rel, e)

    logger.info("Scanned %s: %d files, %d symbols", root, tree.total_files(), tree.total_symbols())
    return ScanResult(tree=tree, failures=failures)
