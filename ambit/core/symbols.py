"""
Symbols — Tree data model for parsed source files

A ProjectTree holds one FileSymbols per file. Each FileSymbols holds an
ordered forest of SymbolNodes; every node exclusively owns its children
(no shared or back references).

Symbol identity:
    <file_path>::<name_path>      e.g. "src/app.py::App/handle_key"

The name path is the slash-joined chain of names from the file root down
to the symbol. Renaming a symbol (or any ancestor) produces a new id.

Lifecycle:
- Trees are produced by a parser and replaced wholesale on re-parse
- Only hashing mutates a node after construction
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .merkle import ZERO_HASH


SymbolId = str

ID_SEPARATOR = "::"
NAME_PATH_SEPARATOR = "/"


def make_symbol_id(file_path: Union[str, Path], name_path: str) -> SymbolId:
    """Build a SymbolId from a file path and a name path."""
    return f"{Path(file_path).as_posix()}{ID_SEPARATOR}{name_path}"


def join_name_path(parent_name_path: str, name: str) -> str:
    """Append a name to a parent's name path (empty parent = file root)."""
    if not parent_name_path:
        return name
    return f"{parent_name_path}{NAME_PATH_SEPARATOR}{name}"


def name_path_of(symbol_id: SymbolId) -> str:
    """Return the part of a SymbolId after the last '::'."""
    return symbol_id.rsplit(ID_SEPARATOR, 1)[-1]


class SymbolCategory(Enum):
    """Semantic bucket for a symbol, independent of language."""
    MODULE = "module"
    TYPE = "type"
    FUNCTION = "function"
    VARIABLE = "variable"
    FIELD = "field"
    OTHER = "other"


@dataclass(frozen=True)
class LineRange:
    """Half-open, 1-based line range: [start, end)."""
    start: int
    end: int

    def overlaps(self, other: "LineRange") -> bool:
        """Strict half-open overlap; touching ranges do not overlap."""
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"L{self.start}-{self.end}"


@dataclass
class SymbolNode:
    """A single symbol and its exclusively-owned children."""
    id: SymbolId
    name: str
    category: SymbolCategory
    label: str                          # Language label, e.g. "class", "def", "fn"
    file_path: str
    byte_range: Tuple[int, int]
    line_range: LineRange
    content_hash: bytes = ZERO_HASH
    merkle_hash: bytes = ZERO_HASH      # Valid only after compute_merkle_hash()
    children: List["SymbolNode"] = field(default_factory=list)
    estimated_tokens: int = 0

    @property
    def name_path(self) -> str:
        return name_path_of(self.id)

    def total_symbols(self) -> int:
        return 1 + sum(child.total_symbols() for child in self.children)

    def total_tokens(self) -> int:
        return self.estimated_tokens + sum(child.total_tokens() for child in self.children)

    def walk(self) -> Iterator["SymbolNode"]:
        """Pre-order iteration over this node and all descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "label": self.label,
            "file_path": self.file_path,
            "byte_range": list(self.byte_range),
            "line_range": [self.line_range.start, self.line_range.end],
            "content_hash": self.content_hash.hex(),
            "merkle_hash": self.merkle_hash.hex(),
            "estimated_tokens": self.estimated_tokens,
            "children": [child.to_dict() for child in self.children],
        }


def walk_symbols(symbols: List[SymbolNode]) -> Iterator[SymbolNode]:
    """Pre-order iteration over a forest of symbols."""
    for sym in symbols:
        yield from sym.walk()


@dataclass
class FileSymbols:
    """A file's worth of symbols, in document order."""
    file_path: str
    symbols: List[SymbolNode] = field(default_factory=list)
    total_lines: int = 0

    def total_symbols(self) -> int:
        return sum(sym.total_symbols() for sym in self.symbols)

    def walk(self) -> Iterator[SymbolNode]:
        return walk_symbols(self.symbols)

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "total_lines": self.total_lines,
            "symbols": [sym.to_dict() for sym in self.symbols],
        }


class ProjectTree:
    """
    The full project symbol tree.

    Files are keyed by path (paths are unique). Iteration is always
    sorted by path so output is deterministic.
    """

    def __init__(self, root: Union[str, Path], files: Optional[List[FileSymbols]] = None):
        self.root = Path(root)
        self._files: Dict[str, FileSymbols] = {}
        for file_symbols in files or []:
            self.put(file_symbols)

    @property
    def files(self) -> List[FileSymbols]:
        return [self._files[path] for path in sorted(self._files)]

    def paths(self) -> List[str]:
        return sorted(self._files)

    def get(self, file_path: Union[str, Path]) -> Optional[FileSymbols]:
        return self._files.get(Path(file_path).as_posix())

    def put(self, file_symbols: FileSymbols) -> Optional[FileSymbols]:
        """Insert or replace a file. Returns the replaced file, if any."""
        key = Path(file_symbols.file_path).as_posix()
        previous = self._files.get(key)
        self._files[key] = file_symbols
        return previous

    def remove(self, file_path: Union[str, Path]) -> Optional[FileSymbols]:
        return self._files.pop(Path(file_path).as_posix(), None)

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, Path)):
            return False
        return Path(file_path).as_posix() in self._files

    def __len__(self) -> int:
        return len(self._files)

    def total_symbols(self) -> int:
        return sum(f.total_symbols() for f in self._files.values())

    def total_files(self) -> int:
        return len(self._files)

    def to_dict(self) -> dict:
        return {
            "root": str(self.root),
            "files": [f.to_dict() for f in self.files],
        }
