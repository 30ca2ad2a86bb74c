"""
Node builders and assemblers.

A Prototype produces a NodeBuilder for its schema type. A builder accepts exactly one
assignment (a scalar, a node, a CBOR item, or a map/list opened with begin_map /
begin_list and closed with finish()), then build() returns the immutable node.

Contract
- Assignments are checked against the declared type; mismatches raise DecodeError.
- A map/list assembler must be finished before build(); every entry builder must itself
  be complete when finish() is called. Violations raise RuntimeError: they indicate a
  decoder bug, never bad input.
- A failed decode simply never reaches finish(), so no node is built from partial input.

Notes:
    - Mutation is local to one builder; built nodes are frozen.
    - assign_cbor recurses over the schema type, whose depth is fixed by the catalog.
"""

from __future__ import annotations

from typing import Any

from multiformats import CID

from ..core.errors import DecodeError, SchemaError
from ..store import cbor
from .kinds import STRING_TAGS, Kind, Tag
from .nodes import (
    NULL,
    BoolNode,
    BytesNode,
    FloatNode,
    IntNode,
    LinkNode,
    ListNode,
    MapNode,
    Maybe,
    Node,
    NullNode,
    StringNode,
    StructNode,
)
from .types import ListType, MapType, ScalarType, SchemaType, StructType, TypeSystem

__all__ = [
    "Prototype",
    "NodeBuilder",
    "MapAssembler",
    "ListAssembler",
]


class Prototype:
    """Factory for builders of one schema type."""

    __slots__ = ("schema_type", "type_system")

    def __init__(self, schema_type: SchemaType, type_system: TypeSystem) -> None:
        self.schema_type = schema_type
        self.type_system = type_system

    @property
    def name(self) -> str:
        return self.schema_type.name

    @property
    def kind(self) -> Kind:
        return self.schema_type.kind

    def new_builder(self, nullable: bool = False) -> NodeBuilder:
        return NodeBuilder(self, nullable=nullable)

    def __repr__(self) -> str:
        return f"Prototype({self.name})"


class NodeBuilder:
    """
    Single-assignment builder for one node of a prototype's type.

    Examples:
        >>> from statediff.schema.catalog import TYPE_SYSTEM
        >>> b = TYPE_SYSTEM.prototype("Int").new_builder()
        >>> b.assign_int(7)
        >>> b.build().value
        7
    """

    def __init__(self, prototype: Prototype, nullable: bool = False) -> None:
        self.prototype = prototype
        self.nullable = nullable
        self._node: Node | None = None
        self._open: MapAssembler | ListAssembler | None = None

    # -- state -----------------------------------------------------------

    @property
    def _type(self) -> SchemaType:
        return self.prototype.schema_type

    @property
    def finished(self) -> bool:
        return self._node is not None

    def _claim(self) -> None:
        if self._node is not None or self._open is not None:
            raise RuntimeError(f"{self.prototype.name}: builder already assigned")

    def _complete(self, node: Node) -> None:
        self._node = node
        self._open = None

    def _mismatch(self, what: str) -> DecodeError:
        t = self._type
        return DecodeError(f"{t.name} ({t.kind.value}): cannot assign {what}")

    def _scalar(self, kind: Kind) -> ScalarType:
        t = self._type
        if not isinstance(t, ScalarType) or t.scalar is not kind:
            raise self._mismatch(kind.value)
        return t

    def build(self) -> Node:
        if self._node is None:
            raise RuntimeError(
                f"{self.prototype.name}: cannot build from an unfinished assembler"
            )
        return self._node

    # -- recursive assemblers --------------------------------------------

    def begin_map(self, size_hint: int = 0) -> MapAssembler:
        t = self._type
        if not isinstance(t, MapType):
            raise self._mismatch("map")
        self._claim()
        self._open = MapAssembler(self, t)
        return self._open

    def begin_list(self, size_hint: int = 0) -> ListAssembler:
        t = self._type
        if not isinstance(t, ListType):
            raise self._mismatch("list")
        self._claim()
        self._open = ListAssembler(self, t)
        return self._open

    # -- scalars ---------------------------------------------------------

    def assign_null(self) -> None:
        if not self.nullable:
            raise self._mismatch("null")
        self._claim()
        self._complete(NULL)

    def assign_bool(self, v: bool) -> None:
        t = self._scalar(Kind.BOOL)
        self._claim()
        self._complete(BoolNode(t.name, bool(v)))

    def assign_int(self, v: int) -> None:
        t = self._scalar(Kind.INT)
        if isinstance(v, bool) or not isinstance(v, int):
            raise self._mismatch(type(v).__name__)
        self._claim()
        self._complete(IntNode(t.name, v))

    def assign_float(self, v: float) -> None:
        t = self._scalar(Kind.FLOAT)
        self._claim()
        self._complete(FloatNode(t.name, float(v)))

    def assign_string(self, v: str | bytes) -> None:
        t = self._scalar(Kind.STRING)
        self._claim()
        if isinstance(v, bytes):
            if t.tag not in STRING_TAGS:
                raise self._mismatch("bytes")
            self._complete(StringNode.from_raw(t.name, v, t.tag))
        else:
            self._complete(StringNode(t.name, v, t.tag))

    def assign_bytes(self, v: bytes) -> None:
        t = self._scalar(Kind.BYTES)
        if not isinstance(v, (bytes, bytearray)):
            raise self._mismatch(type(v).__name__)
        self._claim()
        self._complete(BytesNode(t.name, bytes(v), t.tag))

    def assign_link(self, v: CID) -> None:
        t = self._scalar(Kind.LINK)
        self._claim()
        self._complete(LinkNode(t.name, v))

    def assign_node(self, node: Node) -> None:
        """
        Assign an already-built node.

        Nodes of exactly this type are taken as-is; scalar nodes of the same kind are
        re-typed (picking up this type's tag); anything else is a schema mismatch.
        """
        if isinstance(node, NullNode):
            self.assign_null()
            return
        t = self._type
        if node.type_name == t.name:
            self._claim()
            self._complete(node)
            return
        if not isinstance(t, ScalarType) or node.kind is not t.scalar:
            raise self._mismatch(f"{node.type_name} ({node.kind.value})")
        if isinstance(node, BoolNode):
            self.assign_bool(node.value)
        elif isinstance(node, IntNode):
            self.assign_int(node.value)
        elif isinstance(node, FloatNode):
            self.assign_float(node.value)
        elif isinstance(node, StringNode):
            self.assign_string(node.raw_bytes() if node.tag in STRING_TAGS else node.value)
        elif isinstance(node, BytesNode):
            self.assign_bytes(node.value)
        elif isinstance(node, LinkNode):
            self._claim()
            self._complete(LinkNode(t.name, node.target))
        else:
            raise self._mismatch(f"{node.type_name} ({node.kind.value})")

    # -- CBOR ------------------------------------------------------------

    def decode_cbor(self, data: bytes) -> None:
        """Decode one dag-cbor document into this builder (the flat-CBOR load path)."""
        self.assign_cbor(cbor.decode(data))

    def assign_cbor(self, obj: Any) -> None:
        """
        Interpret a decoded CBOR item as this builder's type.

        Raises:
            DecodeError: If the item's shape does not match the schema type.
        """
        if obj is None:
            self.assign_null()
            return
        t = self._type
        if isinstance(t, StructType):
            self._assign_struct(t, obj)
        elif isinstance(t, MapType):
            if not isinstance(obj, dict):
                raise self._mismatch(f"CBOR {type(obj).__name__}")
            mapper = self.begin_map(len(obj))
            for k, v in obj.items():
                mapper.assemble_entry(k).assign_cbor(v)
            mapper.finish()
        elif isinstance(t, ListType):
            if not isinstance(obj, list):
                raise self._mismatch(f"CBOR {type(obj).__name__}")
            lister = self.begin_list(len(obj))
            for v in obj:
                lister.assemble_value().assign_cbor(v)
            lister.finish()
        else:
            self._assign_scalar_cbor(t, obj)

    def _assign_scalar_cbor(self, t: ScalarType, obj: Any) -> None:
        kind = t.scalar
        if kind is Kind.BOOL and isinstance(obj, bool):
            self.assign_bool(obj)
        elif kind is Kind.INT and isinstance(obj, int) and not isinstance(obj, bool):
            self.assign_int(obj)
        elif kind is Kind.FLOAT and isinstance(obj, float):
            self.assign_float(obj)
        elif kind is Kind.STRING and isinstance(obj, str):
            self.assign_string(obj)
        elif kind is Kind.STRING and isinstance(obj, bytes) and t.tag in STRING_TAGS:
            self.assign_string(obj)
        elif kind is Kind.BYTES and isinstance(obj, bytes):
            self.assign_bytes(obj)
        elif kind is Kind.LINK and isinstance(obj, CID):
            self.assign_link(obj)
        else:
            raise self._mismatch(f"CBOR {type(obj).__name__}")

    def _assign_struct(self, t: StructType, obj: Any) -> None:
        if not isinstance(obj, list):
            raise self._mismatch(f"CBOR {type(obj).__name__} (expected tuple)")
        if len(obj) != len(t.fields):
            raise DecodeError(
                f"{t.name}: expected {len(t.fields)} tuple fields, got {len(obj)}"
            )
        ts = self.prototype.type_system
        fields: list[tuple[str, Maybe]] = []
        for f, item in zip(t.fields, obj):
            child = ts.prototype(f.type).new_builder(nullable=f.nullable)
            child.assign_cbor(item)
            fields.append((f.name, Maybe.of(child.build())))
        self._claim()
        self._complete(StructNode(t.name, tuple(fields)))


def _key_node(key_type: ScalarType, key: str | bytes) -> StringNode:
    if isinstance(key, bytes):
        if key_type.tag not in STRING_TAGS:
            raise DecodeError(f"{key_type.name}: binary map key for untagged key type")
        return StringNode.from_raw(key_type.name, key, key_type.tag)
    if not isinstance(key, str):
        raise DecodeError(f"{key_type.name}: map key must be a string, got {type(key).__name__}")
    return StringNode(key_type.name, key, key_type.tag)


class MapAssembler:
    """Collects (key, value builder) pairs in insertion order."""

    def __init__(self, owner: NodeBuilder, map_type: MapType) -> None:
        ts = owner.prototype.type_system
        key_type = ts.get(map_type.key)
        if not isinstance(key_type, ScalarType):
            raise SchemaError(f"{map_type.name}: map key type {map_type.key!r} is not a scalar")
        self._owner = owner
        self._type = map_type
        self._key_type = key_type
        self._value_proto = ts.prototype(map_type.value)
        self._entries: list[tuple[StringNode, NodeBuilder]] = []
        self._seen: set[str] = set()
        self._done = False

    @property
    def key_tag(self) -> Tag:
        return self._key_type.tag

    def assemble_entry(self, key: str | bytes) -> NodeBuilder:
        if self._done:
            raise RuntimeError(f"{self._type.name}: map assembler already finished")
        knode = _key_node(self._key_type, key)
        if knode.value in self._seen:
            raise DecodeError(f"{self._type.name}: repeated map key {knode.value!r}")
        self._seen.add(knode.value)
        child = self._value_proto.new_builder(nullable=self._type.value_nullable)
        self._entries.append((knode, child))
        return child

    def finish(self) -> None:
        if self._done:
            raise RuntimeError(f"{self._type.name}: map assembler finished twice")
        entries = tuple((k, b.build()) for k, b in self._entries)
        self._done = True
        self._owner._complete(MapNode(self._type.name, entries))


class ListAssembler:
    def __init__(self, owner: NodeBuilder, list_type: ListType) -> None:
        self._owner = owner
        self._type = list_type
        self._value_proto = owner.prototype.type_system.prototype(list_type.value)
        self._items: list[NodeBuilder] = []
        self._done = False

    def assemble_value(self) -> NodeBuilder:
        if self._done:
            raise RuntimeError(f"{self._type.name}: list assembler already finished")
        child = self._value_proto.new_builder(nullable=self._type.value_nullable)
        self._items.append(child)
        return child

    def finish(self) -> None:
        if self._done:
            raise RuntimeError(f"{self._type.name}: list assembler finished twice")
        items = tuple(b.build() for b in self._items)
        self._done = True
        self._owner._complete(ListNode(self._type.name, items))
