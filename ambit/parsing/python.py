"""
Python parser — stdlib ast based symbol extraction

Symbols extracted:
- class: class definitions (category TYPE), recursed for members
- def: module-level functions and methods (category FUNCTION)

Function bodies are not descended into; nested functions belong to their
enclosing function's content. Decorated definitions span their decorators.

Line ranges are half-open: a def on lines 10..20 gets [10, 21).
"""

import ast
from pathlib import Path
from typing import List, Union

from ..core.merkle import compute_file_merkle, content_hash, estimate_tokens
from ..core.symbols import (
    FileSymbols, LineRange, SymbolCategory, SymbolNode,
    join_name_path, make_symbol_id,
)
from .base import LanguageParser, ParseError, UniqueNames, count_lines, line_byte_offsets


_Definition = Union[ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef]


class PythonParser(LanguageParser):
    """Extracts classes, functions and methods from Python source."""

    name = "Python"
    extensions = frozenset({".py", ".pyi"})

    def parse_file(self, path: Path, source: str) -> FileSymbols:
        try:
            tree = ast.parse(source, filename=str(path))
        except (SyntaxError, ValueError) as e:
            raise ParseError(path, f"invalid Python source ({e})") from e

        file_path = Path(path).as_posix()
        extraction = _Extraction(file_path, source)
        symbols = extraction.extract(tree.body, "")

        file_symbols = FileSymbols(
            file_path=file_path,
            symbols=symbols,
            total_lines=count_lines(source),
        )
        compute_file_merkle(file_symbols)
        return file_symbols


class _Extraction:
    """State for one file's extraction pass."""

    def __init__(self, file_path: str, source: str):
        self.file_path = file_path
        self.data, self.offsets = line_byte_offsets(source)

    def extract(self, body: List[ast.stmt], parent_name_path: str) -> List[SymbolNode]:
        names = UniqueNames()
        symbols = []
        for node in body:
            if not isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            name_path = names.claim(join_name_path(parent_name_path, node.name))
            symbols.append(self._build(node, name_path))
        return symbols

    def _build(self, node: _Definition, name_path: str) -> SymbolNode:
        start_line = node.decorator_list[0].lineno if node.decorator_list else node.lineno
        end_line = node.end_lineno or node.lineno
        start_byte = self.offsets[start_line - 1] + node.col_offset
        end_byte = self.offsets[end_line - 1] + (node.end_col_offset or 0)
        text = self.data[start_byte:end_byte].decode("utf-8", errors="replace")

        if isinstance(node, ast.ClassDef):
            category, label = SymbolCategory.TYPE, "class"
        else:
            category = SymbolCategory.FUNCTION
            label = "async def" if isinstance(node, ast.AsyncFunctionDef) else "def"

        sym = SymbolNode(
            id=make_symbol_id(self.file_path, name_path),
            name=node.name,
            category=category,
            label=label,
            file_path=self.file_path,
            byte_range=(start_byte, end_byte),
            line_range=LineRange(start_line, end_line + 1),
            content_hash=content_hash(text),
            estimated_tokens=estimate_tokens(text),
        )

        if isinstance(node, ast.ClassDef):
            sym.children = self.extract(node.body, name_path)
        return sym
