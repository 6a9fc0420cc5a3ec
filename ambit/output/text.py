"""
TextFormatter — Fixed-width coverage table for terminals

    Coverage Report (session: abc123)
    ─────────────────────────────────────
    File              Symbols    Seen    Full   Seen%   Full%
    ─────────────────────────────────────
    src/lib.py              4       2       1     50%     25%
    ─────────────────────────────────────
    TOTAL                   4       2       1     50%     25%

The path column is as wide as the longest path, but never narrower
than min_path_width.
"""

from typing import TYPE_CHECKING, Optional

from .base import CoverageFormatter
from .symbols import UNICODE, SymbolSet

if TYPE_CHECKING:
    from ..tracking.coverage import CoverageReport


TOTAL_LABEL = "TOTAL"
NUMERIC_COLUMNS_WIDTH = 45


class TextFormatter(CoverageFormatter):
    """Plain-text table formatter."""

    def __init__(self, min_path_width: int = 40, symbols: Optional[SymbolSet] = None):
        self.min_path_width = min_path_width
        self.symbols = symbols or UNICODE

    def format(self, report: "CoverageReport") -> str:
        session = report.session_id or "none"
        width = max(
            max((len(f.path) for f in report.files), default=0),
            self.min_path_width,
            len(TOTAL_LABEL),
        )
        separator = self.symbols.box_h * (width + NUMERIC_COLUMNS_WIDTH)

        lines = [f"Coverage Report (session: {session})"]
        if report.agent_id:
            lines.append(f"Agent: {report.agent_id}")
        lines.append(separator)
        lines.append(
            f"{'File':<{width}} {'Symbols':>8} {'Seen':>7} {'Full':>7} {'Seen%':>7} {'Full%':>7}"
        )
        lines.append(separator)

        for f in report.files:
            lines.append(self._row(
                f.path, f.total_symbols, f.seen_count, f.full_count,
                f.seen_percent, f.full_percent, width,
            ))

        lines.append(separator)
        lines.append(self._row(
            TOTAL_LABEL, report.total_symbols, report.total_seen, report.total_full,
            report.total_seen_percent, report.total_full_percent, width,
        ))

        return "\n".join(lines) + "\n"

    def _row(self, label: str, total: int, seen: int, full: int,
             seen_pct: float, full_pct: float, width: int) -> str:
        return f"{label:<{width}} {total:>8} {seen:>7} {full:>7} {seen_pct:>6.0f}% {full_pct:>6.0f}%"
