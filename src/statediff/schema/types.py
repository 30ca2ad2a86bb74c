"""
Pydantic v2 models declaring the schema types that typed nodes are built against.

Responsibilities
- Declare scalar, struct (tuple representation), map and list types by name.
- Validate declarations eagerly: tag/kind agreement, unique struct field names,
  string-kind map keys, and resolvable type references (TypeSystem.validate()).
- Hand out Prototypes, the entry point to node construction (statediff.schema.builder).

Style
- Zero-IO (stdlib + pydantic only).
- Type references are by name so that declarations can appear in any order; a TypeSystem
  is validated once after every catalog module has accumulated into it.

Examples:
    >>> from statediff.schema.types import ScalarType, StructType, StructField, TypeSystem
    >>> from statediff.schema.kinds import Kind
    >>> ts = TypeSystem()
    >>> ts.accumulate(ScalarType(name="Int", scalar=Kind.INT))
    >>> ts.accumulate(StructType(name="Pair", fields=(
    ...     StructField(name="A", type="Int"), StructField(name="B", type="Int"))))
    >>> ts.validate()
    >>> ts.get("Pair").kind
    <Kind.MAP: 'map'>
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..core.errors import ResolutionError, SchemaError
from .kinds import BYTES_TAGS, STRING_TAGS, Kind, Tag

if TYPE_CHECKING:
    from .builder import Prototype

__all__ = [
    "ScalarType",
    "StructField",
    "StructType",
    "MapType",
    "ListType",
    "SchemaType",
    "TypeSystem",
]

_SCALAR_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.STRING, Kind.BYTES, Kind.LINK})


class _TypeBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        if not v or not v.replace("_", "").isalnum():
            raise ValueError(f"invalid type name {v!r}")
        return v


class ScalarType(_TypeBase):
    """
    Scalar type with an optional domain tag.

    Attributes:
        name (str): Type name, e.g. "Address".
        scalar (Kind): One of BOOL, INT, FLOAT, STRING, BYTES, LINK.
        tag (Tag): Rendering tag; bytes tags only on BYTES, string tags only on STRING.
    """

    scalar: Kind
    tag: Tag = Tag.NONE

    @model_validator(mode="after")
    def _check_tag(self) -> ScalarType:
        if self.scalar not in _SCALAR_KINDS:
            raise ValueError(f"{self.name}: {self.scalar.value} is not a scalar kind")
        if self.tag in BYTES_TAGS and self.scalar is not Kind.BYTES:
            raise ValueError(f"{self.name}: tag {self.tag.value} requires bytes")
        if self.tag in STRING_TAGS and self.scalar is not Kind.STRING:
            raise ValueError(f"{self.name}: tag {self.tag.value} requires string")
        return self

    @property
    def kind(self) -> Kind:
        return self.scalar


class StructField(BaseModel):
    """
    One field of a tuple-represented struct.

    Attributes:
        name (str): Field name as rendered in output maps.
        type (str): Referenced type name.
        nullable (bool): CBOR null is accepted (held as Maybe null).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: str
    nullable: bool = False


class StructType(_TypeBase):
    """Struct with tuple representation: encoded as a CBOR array in field order."""

    fields: tuple[StructField, ...]

    @field_validator("fields")
    @classmethod
    def _unique_fields(cls, v: tuple[StructField, ...]) -> tuple[StructField, ...]:
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate struct field names in {names!r}")
        return v

    @property
    def kind(self) -> Kind:
        return Kind.MAP


class MapType(_TypeBase):
    """Map from a string-kind key type to a value type."""

    key: str = "String"
    value: str
    value_nullable: bool = False

    @property
    def kind(self) -> Kind:
        return Kind.MAP


class ListType(_TypeBase):
    value: str
    value_nullable: bool = False

    @property
    def kind(self) -> Kind:
        return Kind.LIST


SchemaType = Union[ScalarType, StructType, MapType, ListType]


class TypeSystem:
    """
    Named collection of schema types.

    Notes:
        - Populated once at import by statediff.schema.catalog, then frozen: freeze()
          validates the declarations and builds one Prototype per type up front.
        - A frozen system rejects further declarations.
    """

    def __init__(self) -> None:
        self._types: dict[str, SchemaType] = {}
        self._prototypes: dict[str, Prototype] = {}
        self._frozen = False

    def accumulate(self, t: SchemaType) -> None:
        if self._frozen:
            raise RuntimeError(f"cannot declare {t.name!r}: type system is frozen")
        if t.name in self._types and self._types[t.name] != t:
            raise SchemaError(f"conflicting declarations for type {t.name!r}")
        self._types[t.name] = t

    def get(self, name: str) -> SchemaType:
        try:
            return self._types[name]
        except KeyError as exc:
            raise ResolutionError(f"unknown schema type: {name}") from exc

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self):
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def prototype(self, name: str) -> Prototype:
        if not self._frozen:
            raise RuntimeError("prototypes are available once the type system is frozen")
        try:
            return self._prototypes[name]
        except KeyError as exc:
            raise ResolutionError(f"unknown schema type: {name}") from exc

    def freeze(self) -> None:
        """
        Validate the declarations and build every Prototype.

        Raises:
            SchemaError: If validate() fails; the system stays unfrozen.
        """
        from .builder import Prototype

        self.validate()
        self._prototypes = {name: Prototype(t, self) for name, t in self._types.items()}
        self._frozen = True

    def validate(self) -> None:
        """
        Check every type reference resolves and every map key type is string-kind.

        Raises:
            SchemaError: On the first dangling reference or invalid key type.
        """
        for t in self._types.values():
            refs: list[str] = []
            if isinstance(t, StructType):
                refs = [f.type for f in t.fields]
            elif isinstance(t, ListType):
                refs = [t.value]
            elif isinstance(t, MapType):
                refs = [t.key, t.value]
                key = self._types.get(t.key)
                if not (isinstance(key, ScalarType) and key.scalar is Kind.STRING):
                    raise SchemaError(f"{t.name}: map key type {t.key!r} is not a string type")
            for ref in refs:
                if ref not in self._types:
                    raise SchemaError(f"{t.name}: reference to undeclared type {ref!r}")
