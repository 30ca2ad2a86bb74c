from __future__ import annotations

import cbor2
import pytest

from statediff.core.errors import BlockNotFound, DecodeError, StructureError
from statediff.store import cbor
from statediff.store.blockstore import Blockstore, MemoryBlockstore, compute_cid
from statediff.store.cbor import Deferred


def test_links_roundtrip_as_tag_42() -> None:
    link = compute_cid(b"hello")
    data = cbor.encode({"l": link, "n": [1, b"\x02"]})
    raw = cbor2.loads(data)
    assert raw["l"].tag == 42
    assert raw["l"].value[0] == 0
    assert cbor.decode(data) == {"l": link, "n": [1, b"\x02"]}


def test_malformed_cbor_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        cbor.decode(b"\x9f")
    with pytest.raises(DecodeError):
        cbor.decode(cbor2.dumps(cbor2.CBORTag(42, b"\x01\x02")))


def test_deferred_interpretations() -> None:
    link = compute_cid(b"x")
    assert Deferred(b"\x01").as_bytes() == b"\x01"
    assert Deferred(5).as_int() == 5
    assert Deferred(link).as_cid() == link
    assert Deferred([1]).raw == cbor.encode([1])
    with pytest.raises(DecodeError):
        Deferred(True).as_int()
    with pytest.raises(DecodeError):
        Deferred(5).as_bytes()


def test_memory_blockstore_put_get(store: MemoryBlockstore) -> None:
    c = store.put_object([1, 2, 3])
    assert isinstance(store, Blockstore)
    assert store.has(c)
    assert len(store) == 1
    assert cbor.decode(store.get(c)) == [1, 2, 3]
    assert c == compute_cid(cbor.encode([1, 2, 3]))
    assert str(c).startswith("bafy")


def test_missing_block_raises_block_not_found(store: MemoryBlockstore) -> None:
    missing = compute_cid(b"absent")
    with pytest.raises(BlockNotFound) as info:
        store.get(missing)
    assert info.value.cid == missing
    assert isinstance(info.value, StructureError)
