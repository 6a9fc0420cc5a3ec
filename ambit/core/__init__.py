"""
Core layer — Symbol model, hashing, ledger and event records.

No I/O and no dependencies outside the standard library.
"""

from .merkle import (
    ZERO_HASH, normalize_source, content_hash, compute_merkle_hash,
    compute_file_merkle, estimate_tokens, short_hash,
)
from .symbols import (
    SymbolId, SymbolCategory, LineRange, SymbolNode, FileSymbols, ProjectTree,
    make_symbol_id, join_name_path, name_path_of, walk_symbols,
)
from .ledger import ReadDepth, ContextEntry, ContextLedger
from .events import ToolCall

__all__ = [
    'ZERO_HASH', 'normalize_source', 'content_hash', 'compute_merkle_hash',
    'compute_file_merkle', 'estimate_tokens', 'short_hash',
    'SymbolId', 'SymbolCategory', 'LineRange', 'SymbolNode', 'FileSymbols', 'ProjectTree',
    'make_symbol_id', 'join_name_path', 'name_path_of', 'walk_symbols',
    'ReadDepth', 'ContextEntry', 'ContextLedger',
    'ToolCall',
]
