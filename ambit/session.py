"""
Session — The current project tree and ledger for one tracking run

Holds the state every operation works against, passed explicitly:

    session = Session(scan_project(root, registry).tree)
    for event in parse_log_file(log_path):
        session.process_event(event)
    report = session.report()

File changes go through update_file() / replace_tree(), which reconcile
before swapping in the new version so changed symbols go stale.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from rapidfuzz import fuzz

from .core.events import ToolCall
from .core.ledger import ContextLedger, ReadDepth
from .core.symbols import FileSymbols, ProjectTree, SymbolNode
from .logs import event_logger, format_event_line
from .parsing.base import ParseError, ParserRegistry
from .parsing.scanner import DEFAULT_MAX_FILE_SIZE, parse_path
from .tracking.coverage import CoverageReport
from .tracking.matcher import apply_event
from .tracking.reconcile import ReconcileResult, reconcile_file, reconcile_project


logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 200       # Trim when the feed grows past this
ACTIVITY_KEEP = 100        # Entries kept after a trim
FUZZY_MIN_SCORE = 60.0


class Session:
    """
    Tracking state for one project.

    Attributes:
        tree: Current project symbol tree
        ledger: Observation depths for every symbol seen so far
        agents_seen: Agent ids in order of first appearance
        agent_filter: When set, queries only count this agent's observations
        activity: Recent tracked events, oldest first
        parse_failures: Relative path -> reason for files that failed to re-parse
    """

    def __init__(
        self,
        tree: ProjectTree,
        ledger: Optional[ContextLedger] = None,
        session_id: Optional[str] = None,
    ):
        self.tree = tree
        self.ledger = ledger if ledger is not None else ContextLedger()
        self.session_id = session_id
        self.agents_seen: List[str] = []
        self.agent_filter: Optional[str] = None
        self.activity: List[ToolCall] = []
        self.parse_failures: Dict[str, str] = {}

    @property
    def project_root(self) -> Path:
        return self.tree.root

    # =========================================================================
    # Events
    # =========================================================================

    def process_event(self, event: ToolCall) -> int:
        """
        Apply one agent tool call.

        Returns:
            Number of symbols recorded in the ledger
        """
        if event.agent_id not in self.agents_seen:
            self.agents_seen.append(event.agent_id)

        count = apply_event(self.tree, self.ledger, event, self.project_root)
        event_logger.info(format_event_line(event))

        if event.is_tracked:
            self.activity.append(event)
            if len(self.activity) > ACTIVITY_LIMIT:
                del self.activity[:len(self.activity) - ACTIVITY_KEEP]

        return count

    def process_events(self, events: List[ToolCall]) -> int:
        """Apply events in order. Returns total symbols recorded."""
        return sum(self.process_event(event) for event in events)

    # =========================================================================
    # Tree changes
    # =========================================================================

    def update_file(self, new_file: FileSymbols) -> ReconcileResult:
        """Reconcile a re-parsed file against its previous version, then swap it in."""
        old = self.tree.get(new_file.file_path)
        result = reconcile_file(old, new_file, self.ledger)
        self.tree.put(new_file)
        self.parse_failures.pop(new_file.file_path, None)
        return result

    def replace_tree(self, new_tree: ProjectTree) -> ReconcileResult:
        """Reconcile a full rescan, then replace the tree."""
        result = reconcile_project(self.tree, new_tree, self.ledger)
        self.tree = new_tree
        self.parse_failures = {
            path: reason for path, reason in self.parse_failures.items()
            if path not in new_tree
        }
        return result

    def remove_file(self, file_path: Union[str, Path]) -> Optional[FileSymbols]:
        """Drop a deleted file. Its ledger entries stay but become unreachable."""
        return self.tree.remove(file_path)

    def mark_parse_failed(self, file_path: Union[str, Path], reason: str = "") -> None:
        """Keep the last good version of a file that failed to re-parse."""
        key = Path(file_path).as_posix()
        self.parse_failures[key] = reason
        logger.warning("Keeping previous symbols for %s: %s", key, reason or "parse failed")

    def reparse_file(
        self,
        path: Union[str, Path],
        registry: ParserRegistry,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> Optional[ReconcileResult]:
        """
        Re-parse one file from disk and apply it.

        Returns:
            ReconcileResult, or None if the parse failed (tree and ledger
            are left untouched)
        """
        try:
            new_file = parse_path(Path(path), self.project_root, registry, max_file_size)
        except ParseError as e:
            self.mark_parse_failed(e.path, e.message)
            return None
        return self.update_file(new_file)

    # =========================================================================
    # Queries
    # =========================================================================

    def cycle_agent_filter(self) -> Optional[str]:
        """Advance the filter: all agents, then each agent in order, then back to all."""
        if not self.agents_seen:
            self.agent_filter = None
        elif self.agent_filter is None:
            self.agent_filter = self.agents_seen[0]
        else:
            try:
                index = self.agents_seen.index(self.agent_filter)
            except ValueError:
                index = len(self.agents_seen)
            if index + 1 < len(self.agents_seen):
                self.agent_filter = self.agents_seen[index + 1]
            else:
                self.agent_filter = None
        return self.agent_filter

    def report(self) -> CoverageReport:
        """Coverage report for the current tree, honoring the agent filter."""
        return CoverageReport.from_project(
            self.tree, self.ledger,
            session_id=self.session_id,
            agent_id=self.agent_filter,
        )

    def depth_of(self, symbol_id: str) -> ReadDepth:
        return self.ledger.depth_of(symbol_id, self.agent_filter)

    def depth_histogram(self) -> Dict[ReadDepth, int]:
        """Count of current-tree symbols at each depth (every depth present)."""
        counts: Counter = Counter()
        for file_symbols in self.tree.files:
            for sym in file_symbols.walk():
                counts[self.depth_of(sym.id)] += 1
        return {depth: counts.get(depth, 0) for depth in ReadDepth}

    def find_symbols(
        self,
        query: str,
        limit: int = 10,
        min_score: float = FUZZY_MIN_SCORE,
    ) -> List[Tuple[SymbolNode, float]]:
        """
        Fuzzy search over symbol name paths.

        Substring hits score 100; the rest are scored with rapidfuzz's
        partial ratio.

        Returns:
            (symbol, score) pairs, best first, ties by id
        """
        needle = query.strip().lower()
        if not needle:
            return []

        matches: List[Tuple[SymbolNode, float]] = []
        for file_symbols in self.tree.files:
            for sym in file_symbols.walk():
                haystack = sym.name_path.lower()
                if needle in haystack:
                    score = 100.0
                else:
                    score = fuzz.partial_ratio(needle, haystack)
                if score >= min_score:
                    matches.append((sym, score))

        matches.sort(key=lambda m: (-m[1], m[0].id))
        return matches[:limit]
