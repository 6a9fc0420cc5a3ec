"""
Reconcile — Propagates staleness when a symbol tree is re-derived

Runs whenever a new tree is produced (one file re-parsed, or a full
refresh), while the old tree is still held:

1. Collect id → content_hash across the old tree
2. Walk the new tree; for each id also present in the old tree whose hash
   differs, ask the ledger to mark it stale
3. New ids stay UNSEEN (nothing was ever observed about them)
4. Only then may the caller replace the stored tree

Identity is purely the SymbolId. A rename looks like delete + create; the
old id's ledger entry is orphaned, not carried over.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.ledger import ContextLedger
from ..core.symbols import FileSymbols, ProjectTree, SymbolId, SymbolNode


logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """What changed between two versions of a tree."""
    changed: List[SymbolId] = field(default_factory=list)     # Same id, different hash
    added: List[SymbolId] = field(default_factory=list)
    removed: List[SymbolId] = field(default_factory=list)
    newly_stale: List[SymbolId] = field(default_factory=list)

    def merge(self, other: "ReconcileResult") -> None:
        self.changed.extend(other.changed)
        self.added.extend(other.added)
        self.removed.extend(other.removed)
        self.newly_stale.extend(other.newly_stale)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed or self.added or self.removed)


def collect_symbol_hashes(
    symbols: List[SymbolNode],
    hashes: Optional[Dict[SymbolId, bytes]] = None,
) -> Dict[SymbolId, bytes]:
    """Map every symbol id in the forest to its content_hash."""
    if hashes is None:
        hashes = {}
    for sym in symbols:
        hashes[sym.id] = sym.content_hash
        collect_symbol_hashes(sym.children, hashes)
    return hashes


def check_staleness(
    symbols: List[SymbolNode],
    old_hashes: Dict[SymbolId, bytes],
    ledger: ContextLedger,
    result: Optional[ReconcileResult] = None,
) -> ReconcileResult:
    """Walk the new forest and mark changed, previously-observed symbols stale."""
    if result is None:
        result = ReconcileResult()
    for sym in symbols:
        old_hash = old_hashes.get(sym.id)
        if old_hash is None:
            result.added.append(sym.id)
        elif old_hash != sym.content_hash:
            result.changed.append(sym.id)
            if ledger.mark_stale_if_changed(sym.id, sym.content_hash):
                result.newly_stale.append(sym.id)
        check_staleness(sym.children, old_hashes, ledger, result)
    return result


def _reconcile_hashes(
    old_hashes: Dict[SymbolId, bytes],
    new_symbols: List[SymbolNode],
    ledger: ContextLedger,
) -> ReconcileResult:
    result = check_staleness(new_symbols, old_hashes, ledger)
    new_ids = set(collect_symbol_hashes(new_symbols))
    result.removed.extend(sid for sid in old_hashes if sid not in new_ids)
    return result


def reconcile_file(
    old: Optional[FileSymbols],
    new: FileSymbols,
    ledger: ContextLedger,
) -> ReconcileResult:
    """
    Reconcile one re-parsed file against its previous version.

    Args:
        old: Previous version (None if the file is new)
        new: Freshly parsed version
        ledger: Session ledger (mutated)
    """
    old_hashes = collect_symbol_hashes(old.symbols) if old is not None else {}
    result = _reconcile_hashes(old_hashes, new.symbols, ledger)
    if result.newly_stale:
        logger.info("%s: %d symbol(s) went stale", new.file_path, len(result.newly_stale))
    return result


def reconcile_project(
    old_tree: ProjectTree,
    new_tree: ProjectTree,
    ledger: ContextLedger,
) -> ReconcileResult:
    """Reconcile a full refresh of the project tree."""
    old_hashes: Dict[SymbolId, bytes] = {}
    for file_symbols in old_tree.files:
        collect_symbol_hashes(file_symbols.symbols, old_hashes)

    new_symbols: List[SymbolNode] = []
    for file_symbols in new_tree.files:
        new_symbols.extend(file_symbols.symbols)

    result = _reconcile_hashes(old_hashes, new_symbols, ledger)
    logger.info(
        "Reconciled project: %d changed, %d added, %d removed, %d newly stale",
        len(result.changed), len(result.added), len(result.removed), len(result.newly_stale),
    )
    return result
