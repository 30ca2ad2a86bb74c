"""
Block store protocol and an in-memory implementation.

Responsibilities
- Define the read-only Blockstore protocol consumed by shard readers and the decoder.
- Provide MemoryBlockstore for tests, fixtures and callers that preload blocks
  (e.g. from a CAR export).

Notes
- Blocks are immutable and content-addressed; a get() that fails will fail identically
  on retry, so no retry logic lives here.
- MemoryBlockstore computes sha2-256 CIDv1 identifiers via multiformats.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from multiformats import CID, multihash

from ..core.errors import BlockNotFound
from . import cbor

__all__ = [
    "Blockstore",
    "MemoryBlockstore",
    "compute_cid",
]


@runtime_checkable
class Blockstore(Protocol):
    def get(self, cid: CID) -> bytes:
        """Return the block bytes for ``cid`` or raise BlockNotFound."""
        ...


def compute_cid(data: bytes, codec: str = "dag-cbor") -> CID:
    """
    Compute the CIDv1 (sha2-256, base32) of a block.

    Examples:
        >>> str(compute_cid(b"\\xa0")).startswith("bafy")
        True
    """
    return CID("base32", 1, codec, multihash.digest(data, "sha2-256"))


class MemoryBlockstore:
    """
    Dict-backed block store.

    Examples:
        >>> bs = MemoryBlockstore()
        >>> c = bs.put_object([1, 2, 3])
        >>> cbor.decode(bs.get(c))
        [1, 2, 3]
    """

    def __init__(self, blocks: dict[CID, bytes] | None = None) -> None:
        self._blocks: dict[CID, bytes] = dict(blocks or {})

    def get(self, cid: CID) -> bytes:
        try:
            return self._blocks[cid]
        except KeyError:
            raise BlockNotFound(cid) from None

    def has(self, cid: CID) -> bool:
        return cid in self._blocks

    def put(self, data: bytes, codec: str = "dag-cbor") -> CID:
        c = compute_cid(data, codec)
        self._blocks[c] = bytes(data)
        return c

    def put_object(self, obj: Any) -> CID:
        """Encode ``obj`` as dag-cbor, store it, and return its CID."""
        return self.put(cbor.encode(obj))

    def __len__(self) -> int:
        return len(self._blocks)
