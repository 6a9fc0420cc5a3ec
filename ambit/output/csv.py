"""
CsvFormatter — Coverage report as CSV for spreadsheets and scripts

One row per file, then a TOTAL row. Percentages carry two decimals.
"""

import csv
import io
from typing import TYPE_CHECKING

from .base import CoverageFormatter

if TYPE_CHECKING:
    from ..tracking.coverage import CoverageReport


HEADER = ["path", "symbols", "seen", "full", "stale", "seen_percent", "full_percent", "status"]


class CsvFormatter(CoverageFormatter):
    """CSV formatter."""

    def format(self, report: "CoverageReport") -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(HEADER)

        for f in report.files:
            writer.writerow([
                f.path, f.total_symbols, f.seen_count, f.full_count, f.stale_count,
                f"{f.seen_percent:.2f}", f"{f.full_percent:.2f}", f.status.label,
            ])

        writer.writerow([
            "TOTAL", report.total_symbols, report.total_seen, report.total_full,
            report.total_stale, f"{report.total_seen_percent:.2f}",
            f"{report.total_full_percent:.2f}", "",
        ])
        return buffer.getvalue()
