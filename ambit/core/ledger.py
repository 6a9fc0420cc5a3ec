"""
Context Ledger — Per-symbol observation depth tracking

Records how deeply an agent has observed each symbol.

Read depth lifecycle:
    unseen → name → overview → signature → full
                                             ↓ (content changed)
                                           stale

Rules:
- Depth only ever goes up. A skim after a full read keeps the full read.
- STALE always applies, regardless of the current depth.
- The other entry fields (hash, timestamp, agent, tokens) refresh only
  when depth is raised.
- STALE sits at the top of the order, so it is sticky: reading a stale
  symbol again does not clear it.

Entries are created lazily on first write and never deleted. An id that
disappears from the current tree simply becomes unreachable.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import Dict, Optional

from .merkle import ZERO_HASH
from .symbols import SymbolId


@total_ordering
class ReadDepth(Enum):
    """Ordered observation depth (UNSEEN lowest, STALE highest)."""
    UNSEEN = 0
    NAME_ONLY = 1
    OVERVIEW = 2
    SIGNATURE = 3
    FULL_BODY = 4
    STALE = 5

    def __lt__(self, other):
        if not isinstance(other, ReadDepth):
            return NotImplemented
        return self.value < other.value

    @property
    def is_seen(self) -> bool:
        """Anything but UNSEEN counts as seen (STALE included)."""
        return self is not ReadDepth.UNSEEN

    @property
    def label(self) -> str:
        return _DEPTH_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "ReadDepth":
        """Parse a display label ("full", "name", ...) or enum name."""
        key = label.strip().lower()
        for depth, depth_label in _DEPTH_LABELS.items():
            if key in (depth_label, depth.name.lower()):
                return depth
        raise ValueError(f"Unknown read depth '{label}'. Valid: {', '.join(_DEPTH_LABELS.values())}")

    def __str__(self) -> str:
        return self.label


_DEPTH_LABELS = {
    ReadDepth.UNSEEN: "unseen",
    ReadDepth.NAME_ONLY: "name",
    ReadDepth.OVERVIEW: "overview",
    ReadDepth.SIGNATURE: "signature",
    ReadDepth.FULL_BODY: "full",
    ReadDepth.STALE: "stale",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ContextEntry:
    """Observation state for one symbol."""
    symbol_id: SymbolId
    depth: ReadDepth = ReadDepth.UNSEEN
    content_hash_at_read: bytes = ZERO_HASH
    timestamp: datetime = field(default_factory=_now)
    agent_id: str = ""
    token_count: int = 0

    def to_dict(self) -> dict:
        return {
            "symbol_id": self.symbol_id,
            "depth": self.depth.label,
            "content_hash_at_read": self.content_hash_at_read.hex(),
            "timestamp": self.timestamp.isoformat(),
            "agent_id": self.agent_id,
            "token_count": self.token_count,
        }


class ContextLedger:
    """
    Mapping of symbol id to ContextEntry for one session.

    Single-writer: callers serialize all mutations. No I/O, no locking.
    """

    def __init__(self):
        self.entries: Dict[SymbolId, ContextEntry] = {}

    def record(
        self,
        symbol_id: SymbolId,
        depth: ReadDepth,
        content_hash: bytes,
        agent_id: str,
        token_count: int,
    ) -> bool:
        """
        Record that a symbol was observed at the given depth.

        Applies only when depth is STALE or strictly greater than the
        current depth.

        Returns:
            True if the entry was updated
        """
        entry = self.entries.get(symbol_id)
        current = entry.depth if entry is not None else ReadDepth.UNSEEN
        if depth is not ReadDepth.STALE and depth <= current:
            return False

        if entry is None:
            entry = ContextEntry(symbol_id=symbol_id)
            self.entries[symbol_id] = entry
        entry.depth = depth
        entry.content_hash_at_read = content_hash
        entry.timestamp = _now()
        entry.agent_id = agent_id
        entry.token_count = token_count
        return True

    def depth_of(self, symbol_id: SymbolId, agent_id: Optional[str] = None) -> ReadDepth:
        """
        Read depth for a symbol, defaulting to UNSEEN.

        Args:
            symbol_id: Symbol to look up
            agent_id: If given, depths last raised by another agent read as UNSEEN
        """
        entry = self.entries.get(symbol_id)
        if entry is None:
            return ReadDepth.UNSEEN
        if agent_id is not None and entry.agent_id != agent_id:
            return ReadDepth.UNSEEN
        return entry.depth

    def entry(self, symbol_id: SymbolId) -> Optional[ContextEntry]:
        return self.entries.get(symbol_id)

    def mark_stale_if_changed(self, symbol_id: SymbolId, current_hash: bytes) -> bool:
        """
        Force an observed symbol to STALE if its content changed since read.

        No-op for unknown ids and UNSEEN entries.

        Returns:
            True if this call moved the symbol to STALE
        """
        entry = self.entries.get(symbol_id)
        if entry is None or entry.depth is ReadDepth.UNSEEN:
            return False
        if entry.content_hash_at_read == current_hash:
            return False
        was_stale = entry.depth is ReadDepth.STALE
        entry.depth = ReadDepth.STALE
        return not was_stale

    def total_seen(self) -> int:
        return sum(1 for entry in self.entries.values() if entry.depth.is_seen)

    def count_by_depth(self) -> Dict[ReadDepth, int]:
        """Snapshot histogram of entries per depth (reporting only)."""
        return dict(Counter(entry.depth for entry in self.entries.values()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, symbol_id: object) -> bool:
        return symbol_id in self.entries

    def to_dict(self) -> dict:
        return {sid: entry.to_dict() for sid, entry in sorted(self.entries.items())}
