"""
Events — Tool-call records produced by agent event sources

One ToolCall describes a single agent tool invocation and how deeply it
exposed the code it touched. Event sources never emit STALE; staleness
only comes from reconciliation.

Targeting:
- target_symbol: full or partial name path ("beta", "App/handle_key")
- target_lines: half-open line range
Neither set means the whole file was observed.
"""

from dataclasses import dataclass
from typing import Optional

from .ledger import ReadDepth
from .symbols import LineRange


@dataclass
class ToolCall:
    """A parsed agent tool call."""
    agent_id: str
    tool_name: str
    read_depth: ReadDepth
    file_path: Optional[str] = None
    description: str = ""
    timestamp: str = ""
    target_symbol: Optional[str] = None
    target_lines: Optional[LineRange] = None

    def __post_init__(self):
        if self.read_depth is ReadDepth.STALE:
            raise ValueError("Tool calls cannot carry STALE depth")

    @property
    def is_targeted(self) -> bool:
        return self.target_symbol is not None or self.target_lines is not None

    @property
    def is_tracked(self) -> bool:
        """Untracked tools carry UNSEEN and never touch the ledger."""
        return self.read_depth is not ReadDepth.UNSEEN

    def target_display(self) -> str:
        if self.target_symbol is not None:
            return self.target_symbol
        if self.target_lines is not None:
            return str(self.target_lines)
        return "-"

    def to_dict(self) -> dict:
        return {
            "agent_id": self.agent_id,
            "tool_name": self.tool_name,
            "read_depth": self.read_depth.label,
            "file_path": self.file_path,
            "description": self.description,
            "timestamp": self.timestamp,
            "target_symbol": self.target_symbol,
            "target_lines": (
                [self.target_lines.start, self.target_lines.end]
                if self.target_lines else None
            ),
        }
