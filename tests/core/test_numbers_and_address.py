from __future__ import annotations

import base64
import hashlib

import pytest

from statediff.core.address import Protocol, address_to_string
from statediff.core.errors import DecodeError
from statediff.core.numbers import (
    big_endian_uint,
    decode_uvarint,
    encode_uvarint,
    uint_key_string,
)


def test_uint_key_string_reads_big_endian_unsigned() -> None:
    assert uint_key_string(b"") == "0"
    assert uint_key_string(b"\x00") == "0"
    assert uint_key_string(b"\x01\x00") == "256"
    assert uint_key_string(b"\x30\x39") == "12345"
    # High bit set is still unsigned
    assert uint_key_string(b"\xff") == "255"
    assert big_endian_uint(b"\x00\x00\x01") == 1


def test_uvarint_roundtrip_and_offsets() -> None:
    for value in (0, 1, 127, 128, 300, 2**63):
        encoded = encode_uvarint(value)
        assert decode_uvarint(encoded) == (value, len(encoded))
    # Decoding from an offset returns the position just past the varint
    assert decode_uvarint(b"\xff\xac\x02\x07", offset=1) == (300, 3)


def test_uvarint_rejects_truncated_and_overflowing_input() -> None:
    with pytest.raises(DecodeError):
        decode_uvarint(b"\x80")
    with pytest.raises(DecodeError):
        decode_uvarint(b"\xff" * 10 + b"\x01")
    with pytest.raises(ValueError):
        encode_uvarint(-1)


def test_id_address_renders_with_network_prefix() -> None:
    raw = bytes([0, 0xD2, 0x09])
    assert address_to_string(raw) == "f01234"
    assert address_to_string(raw, "t") == "t01234"


def test_secp_address_carries_blake2b_checksum() -> None:
    # Arrange
    raw = bytes([Protocol.SECP256K1]) + bytes(range(20))

    # Act
    text = address_to_string(raw)

    # Assert
    assert text.startswith("f1")
    assert text == text.lower()
    body = text[2:].upper()
    decoded = base64.b32decode(body + "=" * (-len(body) % 8))
    assert decoded[:20] == bytes(range(20))
    assert decoded[20:] == hashlib.blake2b(raw, digest_size=4).digest()


def test_bls_address_requires_48_byte_payload() -> None:
    good = bytes([Protocol.BLS]) + b"\x01" * 48
    assert address_to_string(good).startswith("f3")
    with pytest.raises(DecodeError):
        address_to_string(bytes([Protocol.BLS]) + b"\x01" * 20)


def test_invalid_addresses_raise_decode_error() -> None:
    with pytest.raises(DecodeError):
        address_to_string(b"")
    with pytest.raises(DecodeError):
        address_to_string(b"\x09\x01")
    with pytest.raises(DecodeError):
        address_to_string(b"\x00\x01\x02")  # trailing bytes after the actor id
