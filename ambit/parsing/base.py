"""
Parser capability — Source text to symbol tree

A LanguageParser has one job: turn a file's raw source into a FileSymbols
tree that follows the symbol model (stable ids, content hashes populated,
children attached before the Merkle pass).

ParserRegistry routes files to parsers by extension, so new languages are
additive: register another parser, no core changes.

Usage:
    registry = ParserRegistry()
    registry.register(PythonParser())

    parser = registry.parser_for(Path("src/app.py"))
    file_symbols = parser.parse_file(Path("src/app.py"), source)
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..core.symbols import FileSymbols


class ParseError(Exception):
    """Raised by a parser when a file cannot be turned into a symbol tree."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class LanguageParser(ABC):
    """
    Language-specific parser.

    Subclasses set `name` and `extensions` and implement parse_file().
    """

    name: str = ""
    extensions: FrozenSet[str] = frozenset()

    @abstractmethod
    def parse_file(self, path: Path, source: str) -> FileSymbols:
        """
        Parse a source file into a hierarchical symbol tree.

        Args:
            path: Path relative to the project root (used in symbol ids)
            source: Full file content

        Returns:
            FileSymbols with Merkle hashes computed

        Raises:
            ParseError: If the source cannot be parsed
        """


def line_byte_offsets(source: str) -> Tuple[bytes, List[int]]:
    """
    Encode source and compute the byte offset at which each line starts.

    Returns:
        (encoded source, offsets) where offsets[i] is the start of line i+1
    """
    data = source.encode("utf-8")
    offsets = [0]
    for index, byte in enumerate(data):
        if byte == 0x0A:
            offsets.append(index + 1)
    return data, offsets


def split_lines(source: str) -> List[str]:
    """
    Split source into lines on newline characters only.

    Line numbers then agree with line_byte_offsets; str.splitlines()
    also breaks on form feeds and Unicode separators.
    """
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def count_lines(source: str) -> int:
    return len(split_lines(source))


class UniqueNames:
    """
    Disambiguates repeated names under one parent.

    The first occurrence keeps its name; later ones get "#2", "#3", ...
    so every name path (and therefore every symbol id) stays unique.
    """

    def __init__(self):
        self._seen: Dict[str, int] = {}

    def claim(self, name_path: str) -> str:
        count = self._seen.get(name_path, 0) + 1
        self._seen[name_path] = count
        if count == 1:
            return name_path
        return f"{name_path}#{count}"


class ParserRegistry:
    """
    Registry of language parsers.

    Maps file extensions to LanguageParser instances.
    """

    def __init__(self):
        self._parsers: Dict[str, LanguageParser] = {}      # name -> parser
        self._extension_map: Dict[str, str] = {}           # ext -> parser name

    def register(self, parser: LanguageParser) -> None:
        """
        Register a parser.

        Raises:
            ValueError: If an extension is already registered to another parser
        """
        for ext in parser.extensions:
            existing = self._extension_map.get(ext.lower())
            if existing is not None and existing != parser.name:
                raise ValueError(
                    f"Extension {ext} already registered to {existing}, "
                    f"cannot register to {parser.name}"
                )

        self._parsers[parser.name] = parser
        for ext in parser.extensions:
            self._extension_map[ext.lower()] = parser.name

    def parser_for(self, path: Path) -> Optional[LanguageParser]:
        """Find the parser for a path by extension, or None."""
        name = self._extension_map.get(Path(path).suffix.lower())
        return self._parsers.get(name) if name else None

    def is_supported(self, path: Path) -> bool:
        return self.parser_for(path) is not None

    def supported_extensions(self) -> Set[str]:
        return set(self._extension_map)


def default_registry() -> ParserRegistry:
    """Registry with every built-in parser."""
    from .python import PythonParser
    from .markdown import MarkdownParser

    registry = ParserRegistry()
    registry.register(PythonParser())
    registry.register(MarkdownParser())
    return registry
