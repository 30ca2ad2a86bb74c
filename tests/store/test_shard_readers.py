from __future__ import annotations

import pytest

from statediff.core.errors import BlockNotFound, StructureError
from statediff.store.adt import as_array, as_multimap, as_set
from statediff.store.amt import load_amt
from statediff.store.blockstore import MemoryBlockstore, compute_cid
from statediff.store.hamt import load_hamt


def test_hamt_yields_entries_once_in_bucket_order(store: MemoryBlockstore, hamt) -> None:
    entries = [(bytes([i]), i * 10) for i in range(7)]
    root = hamt(store, entries)

    got = [(k, v.as_int()) for k, v in load_hamt(store, root).items()]

    assert got == entries


def test_hamt_descends_into_child_shards(store: MemoryBlockstore, hamt) -> None:
    entries = [(i.to_bytes(2, "big"), i) for i in range(200)]
    root = hamt(store, entries, bucket=3)
    assert len(store) > 1

    got = dict((k, v.as_int()) for k, v in load_hamt(store, root).items())

    assert got == dict(entries)


def test_hamt_reads_kinded_pointers(store: MemoryBlockstore, hamt) -> None:
    entries = [(i.to_bytes(2, "big"), i) for i in range(120)]
    root = hamt(store, entries, kinded=True)
    assert sorted(load_hamt(store, root).keys()) == sorted(k for k, _ in entries)


def test_hamt_rejects_popcount_mismatch(store: MemoryBlockstore) -> None:
    root = store.put_object([b"\x03", [{"1": [[b"a", 1]]}]])
    with pytest.raises(StructureError, match="bits"):
        load_hamt(store, root)


def test_hamt_rejects_bitfield_wider_than_fanout(store: MemoryBlockstore) -> None:
    root = store.put_object([(1 << 40).to_bytes(6, "big"), [{"1": [[b"a", 1]]}]])
    with pytest.raises(StructureError):
        load_hamt(store, root)


def test_hamt_missing_child_surfaces_during_iteration(store: MemoryBlockstore) -> None:
    dangling = compute_cid(b"nope")
    root = store.put_object([b"\x01", [{"0": dangling}]])
    reader = load_hamt(store, root)
    with pytest.raises(BlockNotFound):
        list(reader.items())


def test_hamt_missing_root(store: MemoryBlockstore) -> None:
    with pytest.raises(BlockNotFound):
        load_hamt(store, compute_cid(b"nope"))


@pytest.mark.parametrize("version", [2, 3])
def test_amt_yields_ascending_indices(store: MemoryBlockstore, amt, version: int) -> None:
    values = {0: "a", 3: "b", 9: "c", 70: "d", 600: "e"}
    root = amt(store, values, version=version)

    reader = as_array(store, root)

    assert reader.count == 5
    assert reader.height > 0
    assert [(i, v.value) for i, v in reader.items()] == sorted(values.items())


def test_amt_v3_respects_bit_width(store: MemoryBlockstore, amt) -> None:
    values = {i: i for i in range(0, 300, 7)}
    root = amt(store, values, bit_width=5)
    reader = load_amt(store, root)
    assert reader.width == 32
    assert dict((i, v.value) for i, v in reader.items()) == values


def test_amt_rejects_bad_root_and_node(store: MemoryBlockstore) -> None:
    with pytest.raises(StructureError):
        load_amt(store, store.put_object({"not": "an amt"}))
    # Leaf with one bit set but no values
    root = store.put_object([0, 1, [b"\x01", [], []]])
    with pytest.raises(StructureError):
        list(load_amt(store, root).items())


def test_amt_count_mismatch_is_detected(store: MemoryBlockstore) -> None:
    root = store.put_object([0, 2, [b"\x01", [], ["only"]]])
    with pytest.raises(StructureError, match="records 2 entries"):
        list(load_amt(store, root).items())


def test_multimap_opens_inner_arrays(store: MemoryBlockstore, hamt, amt) -> None:
    inner_a = amt(store, {0: "x", 1: "y"})
    inner_b = amt(store, {5: "z"})
    root = hamt(store, [(b"\x01", inner_a), (b"\x02", inner_b)])

    got = {k: [(i, v.value) for i, v in arr.items()] for k, arr in as_multimap(store, root)}

    assert got == {b"\x01": [(0, "x"), (1, "y")], b"\x02": [(5, "z")]}


def test_multimap_value_must_be_a_link(store: MemoryBlockstore, hamt) -> None:
    root = hamt(store, [(b"\x01", 5)])
    with pytest.raises(StructureError):
        list(as_multimap(store, root).items())


def test_set_yields_member_keys(store: MemoryBlockstore, hamt) -> None:
    root = hamt(store, [(b"\x01", []), (b"\x07", [])])
    assert list(as_set(store, root)) == [b"\x01", b"\x07"]
