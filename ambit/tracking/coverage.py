"""
Coverage — Aggregates the ledger into per-file and project-level metrics

Per-file status (sort order: partially → all seen → fully → not covered):

    full == 0 (or no symbols):
        every symbol seen     → ALL_SEEN
        some symbol seen      → PARTIALLY_COVERED
        nothing seen          → NOT_COVERED
    full > 0:
        every symbol full     → FULLY_COVERED
        every symbol seen     → ALL_SEEN
        otherwise             → PARTIALLY_COVERED

"Seen" is any depth but UNSEEN (STALE included). "Full" is exactly
FULL_BODY; a stale symbol never counts as full.

Usage:
    report = CoverageReport.from_project(tree, ledger)
    print(TextFormatter().format(report))
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, List, Optional, Tuple

from ..core.ledger import ContextLedger, ReadDepth
from ..core.symbols import FileSymbols, ProjectTree, SymbolNode


# =============================================================================
# Counting
# =============================================================================

def count_symbols(
    symbols: List[SymbolNode],
    ledger: ContextLedger,
    agent_id: Optional[str] = None,
) -> Tuple[int, int, int]:
    """
    Fold a symbol forest into (total, seen, full), visiting each node once.

    Args:
        symbols: Forest to count
        ledger: Ledger to read depths from
        agent_id: Only count observations made by this agent

    Returns:
        (total, seen, full)
    """
    total = seen = full = 0
    for sym in symbols:
        total += 1
        depth = ledger.depth_of(sym.id, agent_id)
        if depth.is_seen:
            seen += 1
        if depth is ReadDepth.FULL_BODY:
            full += 1

        child_total, child_seen, child_full = count_symbols(sym.children, ledger, agent_id)
        total += child_total
        seen += child_seen
        full += child_full

    return total, seen, full


def count_stale(
    symbols: List[SymbolNode],
    ledger: ContextLedger,
    agent_id: Optional[str] = None,
) -> int:
    """Number of symbols in the forest currently marked STALE (for agent_id, if given)."""
    count = 0
    for sym in symbols:
        if ledger.depth_of(sym.id, agent_id) is ReadDepth.STALE:
            count += 1
        count += count_stale(sym.children, ledger, agent_id)
    return count


def _percent(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return part / total * 100.0


# =============================================================================
# Classification
# =============================================================================

@total_ordering
class FileCoverageStatus(Enum):
    """Four-state file coverage; value order is the display sort order."""
    PARTIALLY_COVERED = 0
    ALL_SEEN = 1
    FULLY_COVERED = 2
    NOT_COVERED = 3

    def __lt__(self, other):
        if not isinstance(other, FileCoverageStatus):
            return NotImplemented
        return self.value < other.value

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


def classify_coverage(total: int, seen: int, full: int) -> FileCoverageStatus:
    """Classify a file from its (total, seen, full) counts."""
    if total == 0 or full == 0:
        if seen > 0 and seen == total:
            return FileCoverageStatus.ALL_SEEN
        if seen > 0:
            return FileCoverageStatus.PARTIALLY_COVERED
        return FileCoverageStatus.NOT_COVERED

    if full == total:
        return FileCoverageStatus.FULLY_COVERED
    if seen == total:
        return FileCoverageStatus.ALL_SEEN
    return FileCoverageStatus.PARTIALLY_COVERED


def classify_file(
    file_symbols: FileSymbols,
    ledger: ContextLedger,
    agent_id: Optional[str] = None,
) -> FileCoverageStatus:
    return classify_coverage(*count_symbols(file_symbols.symbols, ledger, agent_id))


def sort_files_by_status(
    tree: ProjectTree,
    ledger: ContextLedger,
    agent_id: Optional[str] = None,
) -> List[FileSymbols]:
    """Files ordered by coverage status, then path."""
    return sorted(
        tree.files,
        key=lambda f: (classify_file(f, ledger, agent_id), f.file_path),
    )


# =============================================================================
# Report
# =============================================================================

@dataclass
class FileCoverage:
    """Per-file coverage metrics."""
    path: str
    total_symbols: int
    seen_count: int
    full_count: int
    stale_count: int = 0

    @property
    def seen_percent(self) -> float:
        return _percent(self.seen_count, self.total_symbols)

    @property
    def full_percent(self) -> float:
        return _percent(self.full_count, self.total_symbols)

    @property
    def status(self) -> FileCoverageStatus:
        return classify_coverage(self.total_symbols, self.seen_count, self.full_count)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_symbols": self.total_symbols,
            "seen_count": self.seen_count,
            "full_count": self.full_count,
            "stale_count": self.stale_count,
            "seen_percent": round(self.seen_percent, 2),
            "full_percent": round(self.full_percent, 2),
            "status": self.status.label,
        }


@dataclass
class CoverageReport:
    """
    Project coverage report.

    Files are ordered least-covered first (ascending full percent, ties by
    path). Totals are plain sums of the per-file numbers.
    """
    files: List[FileCoverage] = field(default_factory=list)
    session_id: Optional[str] = None
    agent_id: Optional[str] = None

    @classmethod
    def from_project(
        cls,
        tree: ProjectTree,
        ledger: ContextLedger,
        session_id: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> "CoverageReport":
        files = []
        for file_symbols in tree.files:
            total, seen, full = count_symbols(file_symbols.symbols, ledger, agent_id)
            files.append(FileCoverage(
                path=file_symbols.file_path,
                total_symbols=total,
                seen_count=seen,
                full_count=full,
                stale_count=count_stale(file_symbols.symbols, ledger, agent_id),
            ))

        files.sort(key=lambda f: (f.full_percent, f.path))
        return cls(files=files, session_id=session_id, agent_id=agent_id)

    @property
    def total_symbols(self) -> int:
        return sum(f.total_symbols for f in self.files)

    @property
    def total_seen(self) -> int:
        return sum(f.seen_count for f in self.files)

    @property
    def total_full(self) -> int:
        return sum(f.full_count for f in self.files)

    @property
    def total_stale(self) -> int:
        return sum(f.stale_count for f in self.files)

    @property
    def total_seen_percent(self) -> float:
        return _percent(self.total_seen, self.total_symbols)

    @property
    def total_full_percent(self) -> float:
        return _percent(self.total_full, self.total_symbols)

    def by_status(self) -> Dict[FileCoverageStatus, List[FileCoverage]]:
        """Group files by coverage status, in status order."""
        groups: Dict[FileCoverageStatus, List[FileCoverage]] = {
            status: [] for status in sorted(FileCoverageStatus)
        }
        for f in self.files:
            groups[f.status].append(f)
        return groups

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "agent_id": self.agent_id,
            "files": [f.to_dict() for f in self.files],
            "totals": {
                "files": len(self.files),
                "total_symbols": self.total_symbols,
                "seen_count": self.total_seen,
                "full_count": self.total_full,
                "stale_count": self.total_stale,
                "seen_percent": round(self.total_seen_percent, 2),
                "full_percent": round(self.total_full_percent, 2),
            },
        }
