"""
IDCodec — Deterministic hash-based aliases for symbol ids

Symbol ids (src/lib.py::Parser/parse) are long and awkward to type.
The codec maps each one to a 5-char code (AA-BB) for display.

Key properties:
- DETERMINISTIC: Same id always produces same code (hash-based)
- PERSISTENT: Works across runs without storage
- READABLE: AA-BB format is distinct and memorable

Usage:
    codec = IDCodec()

    code = codec.encode("src/lib.py::Parser/parse")   # e.g. "KM-XP", always
    line = codec.format_with_code(symbol_id, "def parse")   # "[KM-XP] def parse"

Code space: 26^4 = 456,976 combinations. Two ids may share a code.
"""

import xxhash


class IDCodec:
    """
    Deterministic hash-based aliasing for symbol ids.

    Uses xxhash for fast, deterministic code generation.
    """

    def encode(self, symbol_id: str) -> str:
        """
        Generate deterministic code for a symbol id.

        Returns:
            5-char code in AA-BB format, or the input unchanged if empty
        """
        if not symbol_id:
            return symbol_id
        return self._hash_to_code(symbol_id)

    def format_with_code(self, symbol_id: str, display_text: str) -> str:
        """Format display as "[AA-BB] display_text"."""
        return f"[{self.encode(symbol_id)}] {display_text}"

    def _hash_to_code(self, value: str) -> str:
        """Map xxh32 of value onto the 26^4 code space."""
        h = xxhash.xxh32(value.encode()).intdigest()
        n = h % (26 ** 4)

        c0 = n % 26
        c1 = (n // 26) % 26
        c2 = (n // 676) % 26
        c3 = (n // 17576) % 26

        return f"{chr(65 + c3)}{chr(65 + c2)}-{chr(65 + c1)}{chr(65 + c0)}"
