"""
Immutable schema-typed nodes.

Every decoded value is one of these frozen dataclasses. Nodes are built once by
statediff.schema.builder and never mutated afterwards, so they may be shared freely
between threads and traversals.

Node classes
- MapNode: ordered entries keyed by StringNode (insertion order is the shard's native order).
- StructNode: kind MAP at the data-model level; each field held in a tri-state Maybe.
- ListNode: ordered items.
- BoolNode, IntNode, FloatNode, StringNode, BytesNode, LinkNode: scalars.
- NullNode / AbsentNode: the NULL singleton and the ABSENT sentinel (kind INVALID).

Notes:
    - StringNode values tagged RAW_ADDRESS or CID_STRING carry binary content. The bytes
      are held as a latin-1 str (a lossless byte-to-codepoint mapping); use raw_bytes().
    - Struct fields that are absent are skipped by map_items() and not counted by length.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .kinds import Kind, Tag

__all__ = [
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
    "AbsentNode",
    "NULL",
    "ABSENT",
    "MaybeState",
    "Maybe",
]


class Node:
    """Common read-only surface of all typed nodes."""

    __slots__ = ()

    kind: ClassVar[Kind] = Kind.INVALID
    type_name: str

    @property
    def length(self) -> int:
        """Number of entries (maps) or items (lists); -1 for scalars."""
        return -1

    def map_items(self) -> Iterator[tuple[StringNode, Node]]:
        raise TypeError(f"{self.type_name} ({self.kind.value}) is not a map")

    def list_items(self) -> Iterator[Node]:
        raise TypeError(f"{self.type_name} ({self.kind.value}) is not a list")

    def lookup(self, key: str | int) -> Node:
        raise TypeError(f"{self.type_name} ({self.kind.value}) has no children")


@dataclass(frozen=True, slots=True)
class StringNode(Node):
    kind: ClassVar[Kind] = Kind.STRING
    type_name: str
    value: str
    tag: Tag = Tag.NONE

    @classmethod
    def from_raw(cls, type_name: str, raw: bytes, tag: Tag) -> StringNode:
        return cls(type_name, raw.decode("latin-1"), tag)

    def raw_bytes(self) -> bytes:
        """Binary content of a RAW_ADDRESS / CID_STRING node."""
        return self.value.encode("latin-1")


@dataclass(frozen=True, slots=True)
class MapNode(Node):
    kind: ClassVar[Kind] = Kind.MAP
    type_name: str
    entries: tuple[tuple[StringNode, Node], ...] = ()

    @property
    def length(self) -> int:
        return len(self.entries)

    def map_items(self) -> Iterator[tuple[StringNode, Node]]:
        return iter(self.entries)

    def keys(self) -> list[str]:
        return [k.value for k, _ in self.entries]

    def lookup(self, key: str | int) -> Node:
        for k, v in self.entries:
            if k.value == key:
                return v
        raise KeyError(key)


class MaybeState(Enum):
    ABSENT = "absent"
    NULL = "null"
    VALUE = "value"


@dataclass(frozen=True, slots=True)
class Maybe:
    """
    Tri-state optional for struct fields.

    Examples:
        >>> Maybe.of(IntNode("Int", 3)).must().value
        3
        >>> Maybe.null().is_null
        True
    """

    state: MaybeState
    value: Node | None = None

    @classmethod
    def absent(cls) -> Maybe:
        return cls(MaybeState.ABSENT)

    @classmethod
    def null(cls) -> Maybe:
        return cls(MaybeState.NULL)

    @classmethod
    def of(cls, node: Node) -> Maybe:
        if isinstance(node, NullNode):
            return cls.null()
        return cls(MaybeState.VALUE, node)

    @property
    def is_absent(self) -> bool:
        return self.state is MaybeState.ABSENT

    @property
    def is_null(self) -> bool:
        return self.state is MaybeState.NULL

    @property
    def exists(self) -> bool:
        return self.state is MaybeState.VALUE

    def as_node(self) -> Node:
        if self.state is MaybeState.VALUE:
            return self.must()
        if self.state is MaybeState.NULL:
            return NULL
        return ABSENT

    def must(self) -> Node:
        if self.state is not MaybeState.VALUE or self.value is None:
            raise ValueError("unbox of a maybe rejected")
        return self.value


@dataclass(frozen=True, slots=True)
class StructNode(Node):
    kind: ClassVar[Kind] = Kind.MAP
    type_name: str
    fields: tuple[tuple[str, Maybe], ...] = ()

    @property
    def length(self) -> int:
        return sum(1 for _, m in self.fields if not m.is_absent)

    def map_items(self) -> Iterator[tuple[StringNode, Node]]:
        for name, maybe in self.fields:
            if maybe.is_absent:
                continue
            yield StringNode("String", name), maybe.as_node()

    def field(self, name: str) -> Maybe:
        for fname, maybe in self.fields:
            if fname == name:
                return maybe
        raise KeyError(name)

    def lookup(self, key: str | int) -> Node:
        maybe = self.field(str(key))
        if maybe.is_absent:
            raise KeyError(key)
        return maybe.as_node()


@dataclass(frozen=True, slots=True)
class ListNode(Node):
    kind: ClassVar[Kind] = Kind.LIST
    type_name: str
    items: tuple[Node, ...] = ()

    @property
    def length(self) -> int:
        return len(self.items)

    def list_items(self) -> Iterator[Node]:
        return iter(self.items)

    def lookup(self, key: str | int) -> Node:
        return self.items[int(key)]


@dataclass(frozen=True, slots=True)
class BoolNode(Node):
    kind: ClassVar[Kind] = Kind.BOOL
    type_name: str
    value: bool


@dataclass(frozen=True, slots=True)
class IntNode(Node):
    kind: ClassVar[Kind] = Kind.INT
    type_name: str
    value: int


@dataclass(frozen=True, slots=True)
class FloatNode(Node):
    kind: ClassVar[Kind] = Kind.FLOAT
    type_name: str
    value: float


@dataclass(frozen=True, slots=True)
class BytesNode(Node):
    kind: ClassVar[Kind] = Kind.BYTES
    type_name: str
    value: bytes
    tag: Tag = Tag.NONE


@dataclass(frozen=True, slots=True)
class LinkNode(Node):
    """Link to another block. ``target`` is a multiformats CID for every decoded link."""

    kind: ClassVar[Kind] = Kind.LINK
    type_name: str
    target: object


@dataclass(frozen=True, slots=True)
class NullNode(Node):
    kind: ClassVar[Kind] = Kind.NULL
    type_name: str = "Null"


@dataclass(frozen=True, slots=True)
class AbsentNode(Node):
    kind: ClassVar[Kind] = Kind.INVALID
    type_name: str = "Absent"


NULL = NullNode()
ABSENT = AbsentNode()
