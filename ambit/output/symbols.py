"""
Symbols — Visual vocabulary for read depths and coverage states

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe_print(): encoding-safe printing for symbol names and
paths taken from arbitrary source files.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from ..core.ledger import ReadDepth
from ..tracking.coverage import FileCoverageStatus


# =============================================================================
# Safe Output
# =============================================================================

# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '─': '-',
    '│': '|',
    '├': '+',
    '└': '+',
    '·': '.',
    '○': 'n',
    '◔': 'o',
    '◑': 's',
    '●': 'F',
    '↻': '!',
    '◐': '~',
    '◕': 'S',
    '✓': '+',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


# =============================================================================
# Symbol Sets
# =============================================================================

@dataclass(frozen=True)
class SymbolSet:
    """Complete set of glyphs for depths, coverage states and structure."""
    # Read depths
    depth_unseen: str
    depth_name: str
    depth_overview: str
    depth_signature: str
    depth_full: str
    depth_stale: str

    # File coverage
    status_partial: str
    status_all_seen: str
    status_full: str
    status_none: str

    # Tree/structure markers
    tree_branch: str
    tree_end: str
    tree_pipe: str

    # Table borders
    box_h: str       # horizontal ─ or -


UNICODE = SymbolSet(
    # Depths
    depth_unseen='·',
    depth_name='○',
    depth_overview='◔',
    depth_signature='◑',
    depth_full='●',
    depth_stale='↻',
    # Coverage
    status_partial='◐',
    status_all_seen='◕',
    status_full='✓',
    status_none='○',
    # Tree
    tree_branch='├─',
    tree_end='└─',
    tree_pipe='│ ',
    # Table
    box_h='─',
)

ASCII = SymbolSet(
    # Depths
    depth_unseen='.',
    depth_name='n',
    depth_overview='o',
    depth_signature='s',
    depth_full='F',
    depth_stale='!',
    # Coverage
    status_partial='[~]',
    status_all_seen='[S]',
    status_full='[OK]',
    status_none='[ ]',
    # Tree
    tree_branch='+-',
    tree_end='+-',
    tree_pipe='| ',
    # Table
    box_h='-',
)


# Mapping from read depth to symbol attribute
DEPTH_TO_SYMBOL = {
    ReadDepth.UNSEEN: 'depth_unseen',
    ReadDepth.NAME_ONLY: 'depth_name',
    ReadDepth.OVERVIEW: 'depth_overview',
    ReadDepth.SIGNATURE: 'depth_signature',
    ReadDepth.FULL_BODY: 'depth_full',
    ReadDepth.STALE: 'depth_stale',
}

# Mapping from coverage status to symbol attribute
STATUS_TO_SYMBOL = {
    FileCoverageStatus.PARTIALLY_COVERED: 'status_partial',
    FileCoverageStatus.ALL_SEEN: 'status_all_seen',
    FileCoverageStatus.FULLY_COVERED: 'status_full',
    FileCoverageStatus.NOT_COVERED: 'status_none',
}


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('AMBIT_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('AMBIT_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if 'utf' in encoding_lower:
            return True

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)

    Returns:
        Appropriate SymbolSet for the environment
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII


def symbol_for_depth(symbols: SymbolSet, depth: ReadDepth) -> str:
    """Get glyph for a read depth."""
    return getattr(symbols, DEPTH_TO_SYMBOL[depth])


def symbol_for_status(symbols: SymbolSet, status: FileCoverageStatus) -> str:
    """Get glyph for a file coverage status."""
    return getattr(symbols, STATUS_TO_SYMBOL[status])

