"""
Integer reinterpretation helpers for raw shard keys and varint-encoded payloads.

Notes:
    - Shard keys are reinterpreted as unsigned big-endian integers of their own length,
      regardless of how they were produced. An empty key is 0.
    - Unsigned varints follow LEB128 (as Go's encoding/binary.Uvarint), capped at 64 bits.
"""

from __future__ import annotations

from .errors import DecodeError

__all__ = [
    "big_endian_uint",
    "uint_key_string",
    "decode_uvarint",
    "encode_uvarint",
]

_MAX_UVARINT_BYTES = 10


def big_endian_uint(raw: bytes) -> int:
    """Interpret ``raw`` as an unsigned big-endian integer."""
    return int.from_bytes(raw, "big", signed=False)


def uint_key_string(raw: bytes) -> str:
    """
    Render a raw shard key as the decimal string of its big-endian unsigned value.

    Args:
        raw (bytes): Key bytes exactly as stored in the shard.

    Returns:
        str: Decimal string; ``"0"`` for an empty key.

    Examples:
        >>> uint_key_string(b"\\x01\\x00")
        '256'
    """
    return str(big_endian_uint(raw))


def decode_uvarint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode an unsigned LEB128 varint.

    Args:
        data (bytes): Buffer holding the varint.
        offset (int): Position of the first varint byte.

    Returns:
        tuple[int, int]: (value, offset just past the varint).

    Raises:
        DecodeError: If the buffer ends mid-varint or the value overflows 64 bits.
    """
    value = 0
    shift = 0
    for i in range(_MAX_UVARINT_BYTES):
        pos = offset + i
        if pos >= len(data):
            raise DecodeError("truncated varint")
        b = data[pos]
        value |= (b & 0x7F) << shift
        if b & 0x80 == 0:
            if value >= 1 << 64:
                raise DecodeError("varint overflows uint64")
            return value, pos + 1
        shift += 7
    raise DecodeError("varint overflows uint64")


def encode_uvarint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned LEB128 varint."""
    if value < 0:
        raise ValueError("uvarint must be non-negative")
    out = bytearray()
    while True:
        b = value & 0x7F
        value >>= 7
        if value:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)
