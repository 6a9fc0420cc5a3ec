"""
JsonFormatter — Coverage report as JSON for piping

Supports:
- Pretty-printed JSON output
- Compact mode for piping
"""

import json
from typing import TYPE_CHECKING

from .base import CoverageFormatter

if TYPE_CHECKING:
    from ..tracking.coverage import CoverageReport


class JsonFormatter(CoverageFormatter):
    """
    Render the report as JSON.

    Useful for piping to jq or feeding another tool.
    """

    def __init__(self, compact: bool = False):
        """
        Args:
            compact: If True, output single line (no indentation)
        """
        self.compact = compact

    def format(self, report: "CoverageReport") -> str:
        data = report.to_dict()
        if self.compact:
            return json.dumps(data, ensure_ascii=False)
        return json.dumps(data, indent=2, ensure_ascii=False)
