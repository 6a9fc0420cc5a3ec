"""
Test Data Factory — Symbol trees and events without a parser

Builds SymbolNode / FileSymbols / ProjectTree fixtures declaratively so
tracking tests do not depend on a language parser.

Usage:
    factory = TreeFactory(tmp_path)
    f = factory.file("src/lib.py", [
        factory.symbol("Parser", lines=(1, 20), children=[
            factory.symbol("parse", lines=(4, 12)),
        ]),
    ])
    tree = factory.tree()
"""

from pathlib import Path
from typing import List, Optional, Tuple

from ambit.core.events import ToolCall
from ambit.core.ledger import ReadDepth
from ambit.core.merkle import compute_file_merkle, content_hash
from ambit.core.symbols import (
    FileSymbols, LineRange, ProjectTree, SymbolCategory, SymbolNode,
    join_name_path, make_symbol_id,
)


class TreeFactory:
    """
    Factory for hand-built project trees.

    Symbols are created detached and get their ids when attached to a
    file via file(), which walks the forest and fills in name paths.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self._files: List[FileSymbols] = []

    def symbol(
        self,
        name: str,
        lines: Tuple[int, int] = (1, 2),
        children: Optional[List[SymbolNode]] = None,
        source: Optional[str] = None,
        category: SymbolCategory = SymbolCategory.FUNCTION,
        label: str = "def",
        tokens: int = 10,
    ) -> SymbolNode:
        """Create a detached symbol; its content hash comes from `source` (default: name)."""
        return SymbolNode(
            id=name,
            name=name,
            category=category,
            label=label,
            file_path="",
            byte_range=(0, 0),
            line_range=LineRange(*lines),
            content_hash=content_hash(source if source is not None else f"def {name}(): pass"),
            children=children or [],
            estimated_tokens=tokens,
        )

    def file(self, path: str, symbols: List[SymbolNode], total_lines: int = 100) -> FileSymbols:
        """Attach symbols to a file, assign ids, run the Merkle pass and register it."""
        for sym in symbols:
            self._assign_ids(sym, path, "")
        file_symbols = FileSymbols(file_path=path, symbols=symbols, total_lines=total_lines)
        compute_file_merkle(file_symbols)
        self._files.append(file_symbols)
        return file_symbols

    def tree(self) -> ProjectTree:
        return ProjectTree(self.root, list(self._files))

    def _assign_ids(self, sym: SymbolNode, path: str, parent_name_path: str) -> None:
        name_path = join_name_path(parent_name_path, sym.name)
        sym.id = make_symbol_id(path, name_path)
        sym.file_path = path
        for child in sym.children:
            self._assign_ids(child, path, name_path)


def make_event(
    file_path: Optional[str] = "src/lib.py",
    depth: ReadDepth = ReadDepth.FULL_BODY,
    agent_id: str = "agent-1",
    tool_name: str = "Read",
    target_symbol: Optional[str] = None,
    target_lines: Optional[Tuple[int, int]] = None,
) -> ToolCall:
    """Build a ToolCall with sensible defaults."""
    return ToolCall(
        agent_id=agent_id,
        tool_name=tool_name,
        read_depth=depth,
        file_path=file_path,
        description=f"{tool_name} {file_path}",
        timestamp="2025-01-15T10:30:00Z",
        target_symbol=target_symbol,
        target_lines=LineRange(*target_lines) if target_lines else None,
    )


def sample_file(factory: TreeFactory, path: str = "src/lib.py") -> FileSymbols:
    """
    A small file used across tests:

        Parser          L1-20  (class)
          parse         L4-12
          reset         L13-20
        helper          L22-26
    """
    return factory.file(path, [
        factory.symbol("Parser", lines=(1, 20), category=SymbolCategory.TYPE, label="class",
                       source="class Parser: ...", children=[
            factory.symbol("parse", lines=(4, 12)),
            factory.symbol("reset", lines=(13, 20)),
        ]),
        factory.symbol("helper", lines=(22, 26)),
    ])
