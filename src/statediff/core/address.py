"""
Filecoin address rendering.

Converts the binary address form found in actor state (protocol byte followed by a
payload) to its canonical string form, e.g. ``f01234`` or ``f1abc...``.

String layout
- ``<network><protocol><payload>`` where network is "f" (mainnet) or "t" (testnet).
- ID addresses (protocol 0): payload is the decimal actor id (binary: uvarint).
- secp256k1 (1), actor (2) and BLS (3): payload is lowercase unpadded base32 of
  ``payload || checksum`` where checksum = blake2b-32 over ``protocol || payload``.
- delegated (4): ``<network>4<namespace>f<base32(subaddress || checksum)>``.

Notes:
    - Stdlib only (hashlib, base64). Zero-IO.
"""

from __future__ import annotations

import base64
import hashlib
from enum import IntEnum

from .constants import NETWORK_PREFIX, NETWORK_PREFIXES
from .errors import DecodeError
from .numbers import decode_uvarint

__all__ = [
    "Protocol",
    "address_to_string",
]

_CHECKSUM_LEN = 4
_MAX_SUBADDRESS_LEN = 54


class Protocol(IntEnum):
    ID = 0
    SECP256K1 = 1
    ACTOR = 2
    BLS = 3
    DELEGATED = 4


_PAYLOAD_LEN: dict[Protocol, int] = {
    Protocol.SECP256K1: 20,
    Protocol.ACTOR: 20,
    Protocol.BLS: 48,
}


def _checksum(raw: bytes) -> bytes:
    return hashlib.blake2b(raw, digest_size=_CHECKSUM_LEN).digest()


def _b32(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").lower().rstrip("=")


def _protocol(raw: bytes) -> Protocol:
    if not raw:
        raise DecodeError("empty address")
    try:
        return Protocol(raw[0])
    except ValueError as exc:
        raise DecodeError(f"unknown address protocol {raw[0]}") from exc


def address_to_string(raw: bytes, network: str = NETWORK_PREFIX) -> str:
    """
    Render a binary address as its canonical string.

    Args:
        raw (bytes): Protocol byte followed by the payload.
        network (str): Network prefix, "f" or "t".

    Returns:
        str: Canonical address string.

    Raises:
        DecodeError: If the protocol is unknown or the payload is malformed.

    Examples:
        >>> address_to_string(bytes([0, 0xd2, 0x09]))
        'f01234'
    """
    if network not in NETWORK_PREFIXES:
        raise ValueError(f"unknown network prefix {network!r}")
    proto = _protocol(raw)
    payload = raw[1:]
    if proto is Protocol.ID:
        actor_id, end = decode_uvarint(payload)
        if end != len(payload):
            raise DecodeError("trailing bytes after ID address")
        return f"{network}0{actor_id}"
    if proto is Protocol.DELEGATED:
        namespace, end = decode_uvarint(payload)
        sub = payload[end:]
        if len(sub) > _MAX_SUBADDRESS_LEN:
            raise DecodeError("delegated subaddress too long")
        return f"{network}4{namespace}f{_b32(sub + _checksum(raw))}"
    if len(payload) != _PAYLOAD_LEN[proto]:
        raise DecodeError(
            f"invalid payload length {len(payload)} for protocol {int(proto)} address"
        )
    return f"{network}{int(proto)}{_b32(payload + _checksum(raw))}"
