from __future__ import annotations

import cbor2
import pytest

from statediff.core.bitfield import BitField
from statediff.core.errors import DecodeError


def test_from_set_collapses_adjacent_members_into_runs() -> None:
    bf = BitField.from_set([5, 0, 1, 2, 9])
    assert bf.runs == ((0, 3), (5, 1), (9, 1))
    assert list(bf) == [0, 1, 2, 5, 9]
    assert len(bf) == 5
    assert 5 in bf and 4 not in bf


def test_canonical_encoding_is_a_fixed_point() -> None:
    encoded = BitField.from_set([0, 2, 5]).to_bytes()
    again = BitField.from_bytes(encoded).to_bytes()
    assert again == encoded
    assert list(BitField.from_bytes(encoded)) == [0, 2, 5]


def test_long_runs_use_varint_lengths() -> None:
    members = list(range(3, 40)) + [100]
    bf = BitField.from_set(members)
    assert list(BitField.from_bytes(bf.to_bytes())) == members


def test_empty_set_encodes_as_empty_bytes() -> None:
    assert BitField.from_set([]).to_bytes() == b""
    assert list(BitField.from_bytes(b"")) == []


def test_decode_accepts_cbor_wrapped_rle() -> None:
    raw = BitField.from_set([0, 2, 5]).to_bytes()
    wrapped = cbor2.dumps(raw)
    assert BitField.decode(wrapped) == BitField.decode(raw)
    assert BitField.from_cbor(wrapped).to_bytes() == raw


def test_unknown_version_is_rejected() -> None:
    with pytest.raises(DecodeError):
        BitField.from_bytes(b"\x01")
    with pytest.raises(DecodeError):
        BitField.decode(b"\x01")


def test_cbor_form_wraps_the_canonical_bytes() -> None:
    bf = BitField.from_set([0, 2, 5])
    assert bf.to_bytes() == b"\xbc\x12"
    assert bf.to_cbor() == b"\x42\xbc\x12"
    assert BitField.from_set([]).to_cbor() == b"\x40"
