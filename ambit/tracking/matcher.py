"""
Matcher — Turns a tool-call event into ledger writes

Whole-file events (no target) record every symbol in the file.

Targeted events walk the file's symbol forest. A node matches when either:
- its name path equals the target, ends with "/<target>", or its bare
  name equals the target
- its line range strictly overlaps the target lines (half-open)

A matching node is recorded and its whole subtree inherits the same depth.
A non-matching node is never recorded itself; the walk descends into its
children looking for a nested match. Zero matches means zero writes.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..core.events import ToolCall
from ..core.ledger import ContextLedger
from ..core.symbols import ProjectTree, SymbolNode, NAME_PATH_SEPARATOR


logger = logging.getLogger(__name__)


def _record(sym: SymbolNode, event: ToolCall, ledger: ContextLedger) -> None:
    ledger.record(
        sym.id,
        event.read_depth,
        sym.content_hash,
        event.agent_id,
        sym.estimated_tokens,
    )


def mark_file_symbols(symbols: List[SymbolNode], event: ToolCall, ledger: ContextLedger) -> int:
    """
    Record every symbol in the forest, recursively, at the event's depth.

    Returns:
        Number of symbols visited
    """
    count = 0
    for sym in symbols:
        _record(sym, event, ledger)
        count += 1
        count += mark_file_symbols(sym.children, event, ledger)
    return count


def symbol_matches_target(sym: SymbolNode, event: ToolCall) -> bool:
    """Check a node against the event's target name and target lines."""
    target_name = event.target_symbol
    if target_name is not None:
        name_path = sym.name_path
        if name_path == target_name or name_path.endswith(f"{NAME_PATH_SEPARATOR}{target_name}"):
            return True
        if sym.name == target_name:
            return True

    if event.target_lines is not None:
        if sym.line_range.overlaps(event.target_lines):
            return True

    return False


def mark_targeted_symbols(symbols: List[SymbolNode], event: ToolCall, ledger: ContextLedger) -> int:
    """
    Record only the symbols the event targets, cascading into matched subtrees.

    Returns:
        Number of symbols recorded
    """
    count = 0
    for sym in symbols:
        if symbol_matches_target(sym, event):
            _record(sym, event, ledger)
            count += 1
            # A matched container covers everything nested inside it
            count += mark_file_symbols(sym.children, event, ledger)
        else:
            count += mark_targeted_symbols(sym.children, event, ledger)
    return count


def normalize_tool_path(tool_path: Union[str, Path], project_root: Union[str, Path]) -> str:
    """
    Convert a tool-call path to the tree's relative path convention.

    Absolute paths under the project root lose the root prefix; anything
    else is returned unchanged.
    """
    path = Path(tool_path)
    if path.is_absolute():
        try:
            path = path.relative_to(Path(project_root))
        except ValueError:
            pass  # Outside the project, keep as-is
    return path.as_posix()


def apply_event(
    tree: ProjectTree,
    ledger: ContextLedger,
    event: ToolCall,
    project_root: Optional[Union[str, Path]] = None,
) -> int:
    """
    Apply one tool-call event to the ledger against the current tree.

    Args:
        tree: Current project tree
        ledger: Session ledger (mutated)
        event: Tool call to apply
        project_root: Root used to relativize absolute paths (default: tree.root)

    Returns:
        Number of symbols recorded (0 when the file is unknown or nothing matched)
    """
    if event.file_path is None or not event.is_tracked:
        return 0

    rel_path = normalize_tool_path(event.file_path, project_root or tree.root)
    file_symbols = tree.get(rel_path)
    if file_symbols is None:
        logger.debug("No symbols for %s (tool=%s)", rel_path, event.tool_name)
        return 0

    if event.is_targeted:
        count = mark_targeted_symbols(file_symbols.symbols, event, ledger)
    else:
        count = mark_file_symbols(file_symbols.symbols, event, ledger)

    logger.debug(
        "%s by %s on %s: %d symbol(s) at %s",
        event.tool_name, event.agent_id, rel_path, count, event.read_depth.label,
    )
    return count
