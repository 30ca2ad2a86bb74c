"""
dag-cbor serialization helpers built on cbor2.

Provides `decode` and `encode` with the one dag-cbor extension actor state needs: tag 42
carries a binary CID prefixed with the identity multibase byte 0x00, and is mapped to and
from multiformats.CID. Also provides `Deferred`, the decoded-but-uninterpreted value
yielded by shard readers.

Notes:
    - encode() is canonical (sorted map keys, shortest ints), so it is stable for hashing.
    - decode() maps every cbor2/multiformats failure to DecodeError.
    - Zero-IO.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import cbor2
from multiformats import CID

from ..core.constants import DAG_CBOR_LINK_TAG
from ..core.errors import DecodeError

__all__ = [
    "decode",
    "encode",
    "cid_from_tag_bytes",
    "Deferred",
]


def cid_from_tag_bytes(raw: bytes) -> CID:
    """Parse the payload of a tag-42 item (0x00 followed by a binary CID)."""
    if not isinstance(raw, bytes) or not raw or raw[0] != 0:
        raise DecodeError("dag-cbor link must be bytes with a 0x00 multibase prefix")
    try:
        return CID.decode(raw[1:])
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise DecodeError(f"invalid CID in dag-cbor link: {exc}") from exc


def _tag_hook(decoder: Any, tag: cbor2.CBORTag) -> Any:
    if tag.tag == DAG_CBOR_LINK_TAG:
        return cid_from_tag_bytes(tag.value)
    return tag


def _default(encoder: Any, value: Any) -> None:
    if isinstance(value, CID):
        encoder.encode(cbor2.CBORTag(DAG_CBOR_LINK_TAG, b"\x00" + bytes(value)))
        return
    raise TypeError(f"cannot dag-cbor encode {type(value).__name__}")


def decode(data: bytes) -> Any:
    """
    Decode one dag-cbor document.

    Args:
        data (bytes): Complete encoded document.

    Returns:
        Any: Python value; links become multiformats.CID instances.

    Raises:
        DecodeError: If the bytes are not a single well-formed CBOR item.
    """
    try:
        return cbor2.loads(data, tag_hook=_tag_hook)
    except DecodeError:
        raise
    except (cbor2.CBORDecodeError, ValueError, EOFError, RecursionError) as exc:
        raise DecodeError(f"malformed CBOR: {exc}") from exc


def encode(obj: Any) -> bytes:
    """Encode a Python value as canonical dag-cbor (CID → tag 42)."""
    return cbor2.dumps(obj, default=_default, canonical=True)


@dataclass(frozen=True, slots=True)
class Deferred:
    """
    A shard entry value whose interpretation waits until its target type is known.

    Attributes:
        value: The decoded CBOR item.
    """

    value: Any

    @property
    def raw(self) -> bytes:
        """Canonical dag-cbor encoding of the value."""
        return encode(self.value)

    def as_bytes(self) -> bytes:
        if not isinstance(self.value, bytes):
            raise DecodeError(f"expected CBOR byte string, got {type(self.value).__name__}")
        return self.value

    def as_int(self) -> int:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise DecodeError(f"expected CBOR integer, got {type(self.value).__name__}")
        return self.value

    def as_cid(self) -> CID:
        if not isinstance(self.value, CID):
            raise DecodeError(f"expected CBOR link, got {type(self.value).__name__}")
        return self.value
