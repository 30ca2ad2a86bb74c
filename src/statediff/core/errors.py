"""
Core exception types raised by type resolution, decoding, shard traversal, and marshaling.

Provides typed exceptions for statediff failures:
- ResolutionError when a type path does not resolve to a registered type key.
- DecodeError for malformed CBOR, invalid scalar encodings, and schema mismatches.
- StructureError (and BlockNotFound) for missing blocks and corrupt shard indexes.
- MarshalError for unsupported nodes, non-CID links, and malformed token streams.
- SchemaError when type declarations or decoder tables disagree with each other.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Errors are never retried: inputs are content-addressed and immutable, so a failed
      decode fails identically on every attempt.
    - Third-party codec errors are re-raised as one of these types with the original
      exception chained as ``__cause__``.

Examples:
    Catch an unknown type path.

    >>> from statediff.core.errors import ResolutionError, StatediffError
    >>> try:
    ...     raise ResolutionError("unknown type: bogus.path")
    ... except StatediffError as e:
    ...     msg = str(e)
    >>> "bogus.path" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "StatediffError",
    "ResolutionError",
    "DecodeError",
    "StructureError",
    "BlockNotFound",
    "MarshalError",
    "SchemaError",
]


class StatediffError(Exception):
    """Base class for all statediff failures."""


class ResolutionError(StatediffError, ValueError):
    """Type path does not resolve to a registered type key."""


class DecodeError(StatediffError, ValueError):
    """Malformed CBOR, invalid scalar encoding, or data that does not fit its schema type."""


class StructureError(StatediffError, LookupError):
    """Sharded structure could not be loaded (corrupt shard index, bad root, missing block)."""


class BlockNotFound(StructureError):
    """
    Raised by a block store when a CID is not present.

    Attributes:
        cid: The content identifier that was requested.
    """

    def __init__(self, cid: object) -> None:
        super().__init__(f"block not found: {cid}")
        self.cid = cid


class MarshalError(StatediffError):
    """Node could not be emitted (absent node, non-CID link, invalid scalar, bad token stream)."""


class SchemaError(StatediffError, ValueError):
    """Inconsistent type declarations or decoder tables (a catalog bug, not bad input)."""
