"""
statediff.store: block access and read-only sharded structure readers.

## Responsibilities
- Blockstore protocol and MemoryBlockstore (blockstore).
- dag-cbor encode/decode with CID links, Deferred shard values (cbor).
- HAMT and AMT readers (hamt, amt) and the actor ADT views built on them (adt).

## Notes
- Nothing here writes to a caller's store; MemoryBlockstore.put exists for fixtures.
- Traversals are iterative and lazy: blocks are fetched only when reached.
"""

from __future__ import annotations

from .adt import Multimap, Set, as_array, as_map, as_multimap, as_set
from .amt import Amt, load_amt
from .blockstore import Blockstore, MemoryBlockstore, compute_cid
from .cbor import Deferred
from .hamt import Hamt, load_hamt

__all__ = [
    "Blockstore",
    "MemoryBlockstore",
    "compute_cid",
    "Deferred",
    "Hamt",
    "load_hamt",
    "Amt",
    "load_amt",
    "Multimap",
    "Set",
    "as_map",
    "as_array",
    "as_multimap",
    "as_set",
]
