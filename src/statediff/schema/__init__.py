"""
statediff.schema: typed nodes and the schema they are built against.

## Responsibilities
- Kinds and tags (kinds), immutable node classes and the tri-state Maybe (nodes).
- Pydantic-validated type declarations and the TypeSystem (types).
- Single-assignment builders and map/list assemblers (builder).
- The Filecoin v0 type catalog (catalog).

## Import DAG discipline
- Depends on statediff.core and statediff.store.cbor only.
- MUST NOT import statediff.decode or statediff.codec.
"""

from __future__ import annotations

from .builder import ListAssembler, MapAssembler, NodeBuilder, Prototype
from .kinds import Kind, Tag
from .nodes import (
    ABSENT,
    NULL,
    BoolNode,
    BytesNode,
    FloatNode,
    IntNode,
    LinkNode,
    ListNode,
    MapNode,
    Maybe,
    MaybeState,
    Node,
    NullNode,
    StringNode,
    StructNode,
)

__all__ = [
    "Kind",
    "Tag",
    "Node",
    "MapNode",
    "StructNode",
    "ListNode",
    "BoolNode",
    "IntNode",
    "FloatNode",
    "StringNode",
    "BytesNode",
    "LinkNode",
    "NullNode",
    "NULL",
    "ABSENT",
    "Maybe",
    "MaybeState",
    "Prototype",
    "NodeBuilder",
    "MapAssembler",
    "ListAssembler",
]
