"""
Output Module — View layer for coverage reports

Separates data from presentation: tracking produces a CoverageReport,
formatters turn it into text.

Usage:
    from ambit.output import get_formatter

    formatter = get_formatter("text")
    print(formatter.format(report))
"""

from .base import CoverageFormatter
from .text import TextFormatter
from .csv import CsvFormatter
from .json import JsonFormatter
from .codec import IDCodec
from .dump import dump_tree
from .symbols import SymbolSet, get_symbols, safe_print


# =============================================================================
# Format Registry
# =============================================================================

# Maps format name to formatter class
FORMATTERS = {
    "text": TextFormatter,
    "csv": CsvFormatter,
    "json": JsonFormatter,
}

# Valid format values for config/CLI
VALID_FORMATS = tuple(FORMATTERS)


def get_formatter(format: str, **kwargs) -> CoverageFormatter:
    """
    Get formatter instance by name.

    Args:
        format: Format name from VALID_FORMATS
        **kwargs: Passed to the formatter constructor

    Raises:
        ValueError: If format is invalid
    """
    if format not in FORMATTERS:
        valid = ", ".join(FORMATTERS.keys())
        raise ValueError(f"Unknown format '{format}'. Valid: {valid}")
    return FORMATTERS[format](**kwargs)


__all__ = [
    'CoverageFormatter', 'TextFormatter', 'CsvFormatter', 'JsonFormatter',
    'FORMATTERS', 'VALID_FORMATS', 'get_formatter',
    'IDCodec', 'dump_tree', 'SymbolSet', 'get_symbols', 'safe_print',
]
