"""
Read-only HAMT (hash array mapped trie) reader.

Supports the go-hamt-ipld node layout used by actor state:

    Node    = [bitfield: bytes, pointers: [Pointer, ...]]
    Pointer = {"0": CID} | {"1": [KV, ...]}     (v1: map-keyed union)
            | CID | [KV, ...]                   (later: kinded union)
    KV      = [key: bytes, value: any]

Iteration visits pointers in array order, descending into linked children depth-first,
which is the structure's native order. Traversal uses an explicit stack so shard depth
never touches the Python recursion limit.

Notes
- Bucket placement is not re-verified against key hashes; the reader only validates
  structure (popcount(bitfield) == len(pointers), bitfield width ≤ 2**bit_width).
- Each shard block is fetched when first reached; the tree is never materialized.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from multiformats import CID

from ..core.constants import HAMT_BIT_WIDTH
from ..core.errors import DecodeError, StructureError
from . import cbor
from .blockstore import Blockstore
from .cbor import Deferred

__all__ = [
    "Hamt",
    "load_hamt",
]

logger = logging.getLogger(__name__)

_END = object()


def _parse_node(obj: Any, bit_width: int, where: CID) -> list[Any]:
    if not isinstance(obj, list) or len(obj) != 2:
        raise StructureError(f"HAMT node {where} is not a [bitfield, pointers] tuple")
    bitfield, pointers = obj
    if not isinstance(bitfield, bytes) or not isinstance(pointers, list):
        raise StructureError(f"HAMT node {where} has malformed bitfield or pointers")
    bits = int.from_bytes(bitfield, "big")
    if bits >> (1 << bit_width):
        raise StructureError(f"HAMT node {where} bitfield wider than bit width {bit_width}")
    if bin(bits).count("1") != len(pointers):
        raise StructureError(
            f"HAMT node {where} bitfield has {bin(bits).count('1')} bits for "
            f"{len(pointers)} pointers"
        )
    return pointers


def _parse_kvs(kvs: Any, where: CID) -> list[tuple[bytes, Deferred]]:
    if not isinstance(kvs, list) or not kvs:
        raise StructureError(f"HAMT bucket in {where} is empty or not a list")
    out: list[tuple[bytes, Deferred]] = []
    for kv in kvs:
        if not isinstance(kv, list) or len(kv) != 2 or not isinstance(kv[0], bytes):
            raise StructureError(f"HAMT bucket entry in {where} is not a [key, value] pair")
        out.append((kv[0], Deferred(kv[1])))
    return out


def _parse_pointer(ptr: Any, where: CID) -> CID | list[tuple[bytes, Deferred]]:
    if isinstance(ptr, dict):
        if len(ptr) != 1:
            raise StructureError(f"HAMT pointer in {where} must have exactly one key")
        if "0" in ptr:
            ptr = ptr["0"]
            if not isinstance(ptr, CID):
                raise StructureError(f"HAMT link pointer in {where} is not a CID")
        elif "1" in ptr:
            return _parse_kvs(ptr["1"], where)
        else:
            raise StructureError(f"HAMT pointer in {where} has unknown key")
    if isinstance(ptr, CID):
        return ptr
    if isinstance(ptr, list):
        return _parse_kvs(ptr, where)
    raise StructureError(f"HAMT pointer in {where} is neither a link nor a bucket")


class Hamt:
    """
    Lazily-read HAMT rooted at a CID.

    Attributes:
        root (CID): Root node CID.
        bit_width (int): log2 of the node fan-out.
    """

    def __init__(self, store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> None:
        self.store = store
        self.root = root
        self.bit_width = bit_width
        self._root_pointers = self._load(root)

    def _load(self, cid: CID) -> list[Any]:
        try:
            obj = cbor.decode(self.store.get(cid))
        except DecodeError as exc:
            raise StructureError(f"HAMT node {cid} is not valid CBOR: {exc}") from exc
        return _parse_node(obj, self.bit_width, cid)

    def items(self) -> Iterator[tuple[bytes, Deferred]]:
        """Yield every (raw key, deferred value) pair once, in native order."""
        stack: list[tuple[CID, Iterator[Any]]] = [(self.root, iter(self._root_pointers))]
        while stack:
            where, pointers = stack[-1]
            ptr = next(pointers, _END)
            if ptr is _END:
                stack.pop()
                continue
            parsed = _parse_pointer(ptr, where)
            if isinstance(parsed, CID):
                logger.debug("descending into HAMT shard %s", parsed)
                stack.append((parsed, iter(self._load(parsed))))
            else:
                yield from parsed

    def keys(self) -> Iterator[bytes]:
        for k, _ in self.items():
            yield k

    def __iter__(self) -> Iterator[tuple[bytes, Deferred]]:
        return self.items()


def load_hamt(store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> Hamt:
    """
    Open a HAMT, reading and validating its root node.

    Raises:
        BlockNotFound: If the root block is missing.
        StructureError: If the root is not a valid HAMT node.
    """
    return Hamt(store, root, bit_width)
