"""
Representation kinds and domain tags for typed nodes.

Kind is the data-model kind a node presents to traversals (the marshaler dispatches on
it). Tag marks scalar nodes whose bytes or strings need domain-specific rendering.

Notes:
    - Enum values are lower_snake/kebab strings so they serialize readably in errors.
    - Tags on BYTES nodes: ADDRESS, BIG_INT, BITFIELD. Tags on STRING nodes: RAW_ADDRESS,
      CID_STRING (binary content carried in a string, typically a map key).
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "Kind",
    "Tag",
    "BYTES_TAGS",
    "STRING_TAGS",
]


class Kind(str, Enum):
    INVALID = "invalid"
    MAP = "map"
    LIST = "list"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    LINK = "link"
    NULL = "null"


class Tag(str, Enum):
    NONE = ""
    ADDRESS = "address"
    BIG_INT = "big-int"
    BITFIELD = "bitfield"
    RAW_ADDRESS = "raw-address"
    CID_STRING = "cid-string"


BYTES_TAGS: frozenset[Tag] = frozenset({Tag.ADDRESS, Tag.BIG_INT, Tag.BITFIELD})
STRING_TAGS: frozenset[Tag] = frozenset({Tag.RAW_ADDRESS, Tag.CID_STRING})
