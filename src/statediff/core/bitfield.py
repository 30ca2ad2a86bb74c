"""
RLE+ bitfield codec.

Bitfields (sector sets, fault sets, ...) are stored as RLE+ run-length encodings. Two
on-disk forms are observed in actor state: the RLE+ bytes directly, and the RLE+ bytes
wrapped in a CBOR byte string. Both are accepted on input. to_bytes() gives the canonical
RLE+ bytes and to_cbor() the same bytes CBOR-wrapped, which is what renderers emit.

RLE+ layout (bits are read least-significant first within each byte)
- 2-bit version, must be 0.
- 1 bit: value of the first run.
- Runs of alternating value, each length encoded as:
    ``1``                     length 1
    ``01`` + 4 bits           length 2..15
    ``00`` + uvarint bytes    length >= 16 (each byte as 8 bits)
- Zero padding up to the byte boundary.

Notes:
    - Canonical output never ends with a run of zeros; the empty set encodes as b"".
    - Zero-length runs and varint-coded runs shorter than 16 are rejected.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import cbor2

from .errors import DecodeError
from .numbers import encode_uvarint

__all__ = [
    "BitField",
]

_MAX_VARINT_BITS = 64


class _BitReader:
    def __init__(self, data: bytes) -> None:
        self._acc = int.from_bytes(data, "little")
        self._size = len(data) * 8
        self._pos = 0

    def read(self, n: int) -> int:
        if self._pos + n > self._size:
            raise DecodeError("RLE+ stream ends mid-run")
        value = (self._acc >> self._pos) & ((1 << n) - 1)
        self._pos += n
        return value

    def exhausted(self) -> bool:
        # Only zero padding remains.
        return (self._acc >> self._pos) == 0

    def read_uvarint(self) -> int:
        value = 0
        shift = 0
        while True:
            b = self.read(8)
            value |= (b & 0x7F) << shift
            if not b & 0x80:
                return value
            shift += 7
            if shift >= _MAX_VARINT_BITS:
                raise DecodeError("RLE+ run length overflows uint64")


class _BitWriter:
    def __init__(self) -> None:
        self._acc = 0
        self._pos = 0

    def put(self, value: int, n: int) -> None:
        self._acc |= (value & ((1 << n) - 1)) << self._pos
        self._pos += n

    def out(self) -> bytes:
        return self._acc.to_bytes((self._pos + 7) // 8, "little")


class BitField:
    """
    Immutable set of non-negative integers backed by runs of set bits.

    Attributes:
        runs (tuple[tuple[int, int], ...]): Sorted, non-adjacent ``(start, length)`` runs
            of set bits.

    Examples:
        >>> bf = BitField.from_set([0, 2, 5])
        >>> list(BitField.from_bytes(bf.to_bytes()))
        [0, 2, 5]
    """

    __slots__ = ("runs",)

    def __init__(self, runs: Iterable[tuple[int, int]] = ()) -> None:
        self.runs: tuple[tuple[int, int], ...] = tuple(runs)

    @classmethod
    def from_set(cls, values: Iterable[int]) -> BitField:
        runs: list[tuple[int, int]] = []
        for v in sorted(set(values)):
            if v < 0:
                raise ValueError("bitfield members must be non-negative")
            if runs and runs[-1][0] + runs[-1][1] == v:
                start, length = runs[-1]
                runs[-1] = (start, length + 1)
            else:
                runs.append((v, 1))
        return cls(runs)

    @classmethod
    def from_bytes(cls, data: bytes) -> BitField:
        """
        Decode raw RLE+ bytes.

        Raises:
            DecodeError: On an unknown version or a malformed run.
        """
        if not data:
            return cls()
        reader = _BitReader(data)
        if reader.read(2) != 0:
            raise DecodeError("unsupported RLE+ version")
        value = bool(reader.read(1))
        pos = 0
        runs: list[tuple[int, int]] = []
        while not reader.exhausted():
            if reader.read(1):
                length = 1
            elif reader.read(1):
                length = reader.read(4)
                if length == 0:
                    raise DecodeError("RLE+ run of length 0")
            else:
                length = reader.read_uvarint()
                if length < 16:
                    raise DecodeError("RLE+ varint run length is not minimal")
            if value:
                runs.append((pos, length))
            pos += length
            value = not value
        return cls(runs)

    @classmethod
    def from_cbor(cls, data: bytes) -> BitField:
        """Decode RLE+ bytes wrapped in a CBOR byte string."""
        try:
            inner = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError) as exc:
            raise DecodeError(f"invalid CBOR-wrapped bitfield: {exc}") from exc
        if not isinstance(inner, bytes):
            raise DecodeError("CBOR-wrapped bitfield is not a byte string")
        return cls.from_bytes(inner)

    @classmethod
    def decode(cls, data: bytes) -> BitField:
        """
        Decode either on-disk form: direct RLE+ first, CBOR-wrapped RLE+ as fallback.

        Raises:
            DecodeError: If neither form decodes.
        """
        try:
            return cls.from_bytes(data)
        except DecodeError:
            return cls.from_cbor(data)

    def to_bytes(self) -> bytes:
        """Encode as canonical RLE+."""
        if not self.runs:
            return b""
        lengths: list[int] = []
        pos = 0
        for start, length in self.runs:
            if start > pos:
                lengths.append(start - pos)
            lengths.append(length)
            pos = start + length
        writer = _BitWriter()
        writer.put(0, 2)
        writer.put(1 if self.runs[0][0] == 0 else 0, 1)
        for length in lengths:
            if length == 1:
                writer.put(1, 1)
            elif length < 16:
                writer.put(0b10, 2)
                writer.put(length, 4)
            else:
                writer.put(0, 2)
                for b in encode_uvarint(length):
                    writer.put(b, 8)
        return writer.out()

    def to_cbor(self) -> bytes:
        """Encode as canonical RLE+ wrapped in a CBOR byte string (the rendered form)."""
        return cbor2.dumps(self.to_bytes())

    def __iter__(self) -> Iterator[int]:
        for start, length in self.runs:
            yield from range(start, start + length)

    def __len__(self) -> int:
        return sum(length for _, length in self.runs)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int):
            return False
        return any(start <= value < start + length for start, length in self.runs)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BitField) and self.runs == other.runs

    def __hash__(self) -> int:
        return hash(self.runs)

    def __repr__(self) -> str:
        return f"BitField(runs={self.runs!r})"
