"""
Merkle — Content and tree hashing for symbol nodes

Two hashes per symbol:
- content_hash: SHA-256 of the symbol's own source, whitespace-normalized
- merkle_hash: SHA-256 of content_hash followed by every child's merkle_hash

Whitespace normalization makes hashing resilient to reformatting while
still catching any token-level change. The Merkle pass is post-order:
it must run over a fully assembled subtree, never a partial one.

Usage:
    from ambit.core.merkle import content_hash, compute_merkle_hash

    node.content_hash = content_hash(source_text)
    compute_merkle_hash(root_node)   # after children are attached
"""

import hashlib
import math
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .symbols import SymbolNode, FileSymbols


DIGEST_SIZE = 32
ZERO_HASH = bytes(DIGEST_SIZE)

# Approximate characters per token for source code
CHARS_PER_TOKEN = 3.5

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_source(source: str) -> str:
    """
    Collapse whitespace runs to a single space and trim both ends.

    Examples:
        normalize_source("fn  foo(\\n    x\\n)")  -> "fn foo( x )"
    """
    return _WHITESPACE_RUN.sub(" ", source).strip()


def content_hash(source: str) -> bytes:
    """Digest of a symbol's normalized source text."""
    normalized = normalize_source(source)
    return hashlib.sha256(normalized.encode("utf-8")).digest()


def compute_merkle_hash(node: "SymbolNode") -> bytes:
    """
    Compute merkle_hash for node and its whole subtree, bottom-up.

    Children are hashed first, then the node digests its own content_hash
    followed by each child's merkle_hash in child order.

    Returns:
        The node's new merkle_hash (also stored on the node)
    """
    for child in node.children:
        compute_merkle_hash(child)

    hasher = hashlib.sha256()
    hasher.update(node.content_hash)
    for child in node.children:
        hasher.update(child.merkle_hash)
    node.merkle_hash = hasher.digest()
    return node.merkle_hash


def compute_file_merkle(file_symbols: "FileSymbols") -> None:
    """Run the Merkle pass over every root symbol of a file."""
    for sym in file_symbols.symbols:
        compute_merkle_hash(sym)


def estimate_tokens(source: str) -> int:
    """
    Rough token estimate: ceil(len / 3.5).

    Only used for relative weighting in reports, never for billing.
    """
    return math.ceil(len(source) / CHARS_PER_TOKEN)


def short_hash(digest: bytes, length: int = 8) -> str:
    """Hex prefix of a digest for display."""
    return digest.hex()[:length]
