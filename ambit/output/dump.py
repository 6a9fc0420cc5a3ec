"""
Tree dump — Project symbol tree annotated with read depths

    ◐ src/lib.py  2/3 seen, partially covered
    ├─ ● [KM-XP] class Parser  L1-20  full
    │  └─ ○ [PL-QR] def parse  L4-12  name
    └─ · [BD-TE] def helper  L22-25  unseen

Files are listed in coverage-status order (least covered first), then path.
"""

from typing import List, Optional

from ..core.ledger import ContextLedger
from ..core.symbols import ProjectTree, SymbolNode
from ..tracking.coverage import classify_coverage, count_symbols, sort_files_by_status
from .codec import IDCodec
from .symbols import SymbolSet, get_symbols, symbol_for_depth, symbol_for_status


def _dump_symbols(
    nodes: List[SymbolNode],
    ledger: ContextLedger,
    symbols: SymbolSet,
    codec: IDCodec,
    agent_id: Optional[str],
    prefix: str,
    lines: List[str],
) -> None:
    for index, node in enumerate(nodes):
        last = index == len(nodes) - 1
        connector = symbols.tree_end if last else symbols.tree_branch
        depth = ledger.depth_of(node.id, agent_id)
        lines.append(
            f"{prefix}{connector} {symbol_for_depth(symbols, depth)} "
            f"{codec.format_with_code(node.id, f'{node.label} {node.name}')}  "
            f"{node.line_range}  {depth.label}"
        )
        child_prefix = prefix + ("   " if last else symbols.tree_pipe + " ")
        _dump_symbols(node.children, ledger, symbols, codec, agent_id, child_prefix, lines)


def dump_tree(
    tree: ProjectTree,
    ledger: ContextLedger,
    symbols: Optional[SymbolSet] = None,
    codec: Optional[IDCodec] = None,
    agent_id: Optional[str] = None,
) -> str:
    """
    Render the whole project tree with each symbol's depth.

    Args:
        tree: Project to render
        ledger: Depth source
        symbols: Glyph set (auto-detect if None)
        codec: Alias codec (default IDCodec())
        agent_id: Show only this agent's observations

    Returns:
        Multi-line string, empty when the tree has no files
    """
    symbols = symbols or get_symbols()
    codec = codec or IDCodec()

    lines: List[str] = []
    for file_symbols in sort_files_by_status(tree, ledger, agent_id):
        total, seen, full = count_symbols(file_symbols.symbols, ledger, agent_id)
        status = classify_coverage(total, seen, full)
        lines.append(
            f"{symbol_for_status(symbols, status)} {file_symbols.file_path}  "
            f"{seen}/{total} seen, {status.label}"
        )
        _dump_symbols(file_symbols.symbols, ledger, symbols, codec, agent_id, "", lines)

    return "\n".join(lines)
