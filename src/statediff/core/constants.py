"""
statediff core defaults.

Defines shard geometry and rendering defaults consumed by the store, decode and codec
layers. This module is zero-IO and uses only the Python standard library.

Notes:
    - HAMT bit width 5 (32-way fan-out) is the width used by every v0 actor HAMT.
    - AMT v2 roots do not record their width; it is fixed at 8.
    - Changing NETWORK_PREFIX only affects how addresses are rendered, never decoding.
"""

from __future__ import annotations

__all__ = [
    "HAMT_BIT_WIDTH",
    "AMT_V2_WIDTH",
    "NETWORK_PREFIX",
    "NETWORK_PREFIXES",
    "JSON_INDENT",
    "DAG_CBOR_LINK_TAG",
]

# Fan-out of actor HAMTs is 2**HAMT_BIT_WIDTH.
HAMT_BIT_WIDTH: int = 5

# Branching factor of go-amt-ipld v2 nodes.
AMT_V2_WIDTH: int = 8

# Address string prefix: "f" for mainnet, "t" for test networks.
NETWORK_PREFIX: str = "f"
NETWORK_PREFIXES: frozenset[str] = frozenset({"f", "t"})

# Indentation used by the JSON text renderer.
JSON_INDENT: int = 2

# CBOR tag carrying a binary CID in dag-cbor.
DAG_CBOR_LINK_TAG: int = 42
