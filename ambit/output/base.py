"""
CoverageFormatter — Abstract base class for report formatters

Each formatter turns a CoverageReport into one string. Adding an output
format means adding one subclass and registering it in FORMATTERS.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tracking.coverage import CoverageReport


class CoverageFormatter(ABC):
    """Formats a coverage report for output."""

    @abstractmethod
    def format(self, report: "CoverageReport") -> str:
        """
        Render the report.

        Args:
            report: CoverageReport to render

        Returns:
            Formatted string for output
        """
        pass
