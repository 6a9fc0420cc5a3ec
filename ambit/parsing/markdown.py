"""
Markdown parser — headings as a nested symbol tree

Headings become navigable symbols:
- H1 (#)   -> top-level section
- H2 (##)  -> nested under the preceding H1
- H3 (###) -> nested under the preceding H2

A heading's range runs until the next heading of the same or higher
level, or end of file. Headings inside fenced code blocks are ignored.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.merkle import compute_file_merkle, content_hash, estimate_tokens
from ..core.symbols import (
    FileSymbols, LineRange, SymbolCategory, SymbolNode,
    NAME_PATH_SEPARATOR, join_name_path, make_symbol_id,
)
from .base import LanguageParser, UniqueNames, line_byte_offsets, split_lines


HEADING_PATTERN = re.compile(r'^(#{1,3})\s+(.+?)\s*#*\s*$')
MAX_LEVEL = 3


def _heading_name(text: str) -> str:
    """Heading text usable as a name path segment."""
    return text.replace(NAME_PATH_SEPARATOR, "-").strip()


class MarkdownParser(LanguageParser):
    """Extracts H1-H3 headings from Markdown documents."""

    name = "Markdown"
    extensions = frozenset({".md", ".markdown"})

    def parse_file(self, path: Path, source: str) -> FileSymbols:
        file_path = Path(path).as_posix()
        lines = split_lines(source)
        data, offsets = line_byte_offsets(source)
        offsets.append(len(data))

        headings = self._find_headings(lines)
        roots: List[SymbolNode] = []
        # Open ancestors: (level, node, name registry for its children)
        stack: List[Tuple[int, Optional[SymbolNode], UniqueNames]] = [(0, None, UniqueNames())]

        for index, (line_num, level, text) in enumerate(headings):
            end_line = len(lines) + 1
            for next_line, next_level, _ in headings[index + 1:]:
                if next_level <= level:
                    end_line = next_line
                    break

            while stack[-1][0] >= level:
                stack.pop()
            _, parent, names = stack[-1]

            parent_path = parent.name_path if parent is not None else ""
            name_path = names.claim(join_name_path(parent_path, _heading_name(text)))

            start_byte = offsets[line_num - 1]
            end_byte = offsets[min(end_line - 1, len(offsets) - 1)]
            body = data[start_byte:end_byte].decode("utf-8", errors="replace")

            node = SymbolNode(
                id=make_symbol_id(file_path, name_path),
                name=text,
                category=SymbolCategory.MODULE,
                label=f"h{level}",
                file_path=file_path,
                byte_range=(start_byte, end_byte),
                line_range=LineRange(line_num, end_line),
                content_hash=content_hash(body),
                estimated_tokens=estimate_tokens(body),
            )
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
            stack.append((level, node, UniqueNames()))

        file_symbols = FileSymbols(file_path=file_path, symbols=roots, total_lines=len(lines))
        compute_file_merkle(file_symbols)
        return file_symbols

    def _find_headings(self, lines: List[str]) -> List[Tuple[int, int, str]]:
        """Return (line number, level, text) for each heading outside code fences."""
        headings = []
        in_code_block = False
        for line_num, line in enumerate(lines, start=1):
            if line.strip().startswith("```"):
                in_code_block = not in_code_block
                continue
            if in_code_block:
                continue
            match = HEADING_PATTERN.match(line)
            if match and len(match.group(1)) <= MAX_LEVEL:
                headings.append((line_num, len(match.group(1)), match.group(2).strip()))
        return headings
