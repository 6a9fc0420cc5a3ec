"""
Tracking layer — Event matching, coverage aggregation, reconciliation.
"""

from .matcher import (
    mark_file_symbols, mark_targeted_symbols, symbol_matches_target,
    normalize_tool_path, apply_event,
)
from .coverage import (
    count_symbols, count_stale, classify_coverage, classify_file, sort_files_by_status,
    FileCoverageStatus, FileCoverage, CoverageReport,
)
from .reconcile import (
    ReconcileResult, collect_symbol_hashes, check_staleness,
    reconcile_file, reconcile_project,
)

__all__ = [
    'mark_file_symbols', 'mark_targeted_symbols', 'symbol_matches_target',
    'normalize_tool_path', 'apply_event',
    'count_symbols', 'count_stale', 'classify_coverage', 'classify_file', 'sort_files_by_status',
    'FileCoverageStatus', 'FileCoverage', 'CoverageReport',
    'ReconcileResult', 'collect_symbol_hashes', 'check_staleness',
    'reconcile_file', 'reconcile_project',
]
