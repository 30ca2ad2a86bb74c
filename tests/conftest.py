from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest
from multiformats import CID

from statediff.store.blockstore import MemoryBlockstore

HamtBuilder = Callable[..., CID]
AmtBuilder = Callable[..., CID]


def _hamt_node(store: MemoryBlockstore, entries: Sequence[tuple[bytes, Any]], bucket: int,
               width: int, kinded: bool) -> list[Any]:
    buckets = [list(entries[i : i + bucket]) for i in range(0, len(entries), bucket)]
    pointers: list[Any] = []
    if len(buckets) > width:
        # Spill everything past the first width-1 buckets into a child shard.
        head = [kv for b in buckets[: width - 1] for kv in b]
        tail = [kv for b in buckets[width - 1 :] for kv in b]
        child = store.put_object(_hamt_node(store, tail, bucket, width, kinded))
        buckets = [head[i : i + bucket] for i in range(0, len(head), bucket)]
        pointers.append(child if kinded else {"0": child})
    for b in buckets:
        kvs = [[k, v] for k, v in b]
        pointers.append(kvs if kinded else {"1": kvs})
    bits = (1 << len(pointers)) - 1
    bitfield = bits.to_bytes((bits.bit_length() + 7) // 8, "big")
    return [bitfield, pointers]


def make_hamt(store: MemoryBlockstore, entries: Sequence[tuple[bytes, Any]], *,
              bucket: int = 3, bit_width: int = 5, kinded: bool = False) -> CID:
    """Store a HAMT holding ``entries`` (in native order) and return its root CID."""
    return store.put_object(_hamt_node(store, list(entries), bucket, 1 << bit_width, kinded))


def _amt_node(store: MemoryBlockstore, values: dict[int, Any], height: int, offset: int,
              width: int) -> list[Any]:
    bmap = bytearray((width + 7) // 8)
    links: list[CID] = []
    leaves: list[Any] = []
    span = width**height
    for i in range(width):
        lo = offset + i * span
        if height == 0:
            if lo in values:
                bmap[i // 8] |= 1 << (i % 8)
                leaves.append(values[lo])
            continue
        inside = {k: v for k, v in values.items() if lo <= k < lo + span}
        if inside:
            bmap[i // 8] |= 1 << (i % 8)
            links.append(store.put_object(_amt_node(store, inside, height - 1, lo, width)))
    return [bytes(bmap), links, leaves]


def make_amt(store: MemoryBlockstore, values: dict[int, Any], *, version: int = 3,
             bit_width: int = 3) -> CID:
    """Store an AMT holding ``values`` and return its root CID."""
    width = 8 if version == 2 else 1 << bit_width
    height = 0
    top = max(values, default=0)
    while top >= width ** (height + 1):
        height += 1
    node = _amt_node(store, values, height, 0, width)
    if version == 2:
        return store.put_object([height, len(values), node])
    return store.put_object([bit_width, height, len(values), node])


@pytest.fixture
def store() -> MemoryBlockstore:
    return MemoryBlockstore()


@pytest.fixture
def hamt() -> HamtBuilder:
    return make_hamt


@pytest.fixture
def amt() -> AmtBuilder:
    return make_amt


@pytest.fixture
def id_address() -> Callable[[int], bytes]:
    """Binary ID address (protocol 0, uvarint actor id)."""
    from statediff.core.numbers import encode_uvarint

    def _make(actor_id: int) -> bytes:
        return b"\x00" + encode_uvarint(actor_id)

    return _make
