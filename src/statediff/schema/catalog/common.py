"""Shared scalar types and declaration helpers for the v0 catalog.

Purpose:
- Primitive types (Int, Bytes, String, Link, ...), Filecoin scalar aliases
  (Address, BigInt, BitField, ChainEpoch, ...) and the shared containers
  (List__Address, List__Link, List__DealID, ...).
- Small constructors so actor modules read as tables of fields.

Notes:
- Address, BigInt and BitField are BYTES with a rendering tag.
- RawAddress and CidString are STRING with a tag; they only appear as map keys,
  where shard keys hold the binary form.
"""

from __future__ import annotations

from ..kinds import Kind, Tag
from ..types import ListType, MapType, ScalarType, StructField, StructType, TypeSystem

__all__ = [
    "field",
    "struct",
    "map_of",
    "list_of",
    "accumulate",
]


def field(name: str, type_name: str, *, nullable: bool = False) -> StructField:
    return StructField(name=name, type=type_name, nullable=nullable)


def struct(name: str, *fields: StructField) -> StructType:
    return StructType(name=name, fields=tuple(fields))


def map_of(name: str, value: str, *, key: str = "String") -> MapType:
    return MapType(name=name, key=key, value=value)


def list_of(name: str, value: str) -> ListType:
    return ListType(name=name, value=value)


_SCALARS: tuple[ScalarType, ...] = (
    ScalarType(name="Bool", scalar=Kind.BOOL),
    ScalarType(name="Int", scalar=Kind.INT),
    ScalarType(name="Float", scalar=Kind.FLOAT),
    ScalarType(name="String", scalar=Kind.STRING),
    ScalarType(name="Bytes", scalar=Kind.BYTES),
    ScalarType(name="Link", scalar=Kind.LINK),
    # Tagged scalars
    ScalarType(name="Address", scalar=Kind.BYTES, tag=Tag.ADDRESS),
    ScalarType(name="BigInt", scalar=Kind.BYTES, tag=Tag.BIG_INT),
    ScalarType(name="BitField", scalar=Kind.BYTES, tag=Tag.BITFIELD),
    ScalarType(name="RawAddress", scalar=Kind.STRING, tag=Tag.RAW_ADDRESS),
    ScalarType(name="CidString", scalar=Kind.STRING, tag=Tag.CID_STRING),
    # Aliases kept distinct so output type names stay meaningful
    ScalarType(name="TokenAmount", scalar=Kind.BYTES, tag=Tag.BIG_INT),
    ScalarType(name="StoragePower", scalar=Kind.BYTES, tag=Tag.BIG_INT),
    ScalarType(name="DealWeight", scalar=Kind.BYTES, tag=Tag.BIG_INT),
    ScalarType(name="DataCap", scalar=Kind.BYTES, tag=Tag.BIG_INT),
    ScalarType(name="ChainEpoch", scalar=Kind.INT),
    ScalarType(name="SectorNumber", scalar=Kind.INT),
    ScalarType(name="DealID", scalar=Kind.INT),
    ScalarType(name="MethodNum", scalar=Kind.INT),
    ScalarType(name="ActorID", scalar=Kind.INT),
    ScalarType(name="PeerID", scalar=Kind.BYTES),
    ScalarType(name="Signature", scalar=Kind.BYTES),
)


def accumulate(ts: TypeSystem) -> None:
    for t in _SCALARS:
        ts.accumulate(t)
    ts.accumulate(list_of("List__Address", "Address"))
    ts.accumulate(list_of("List__Link", "Link"))
    ts.accumulate(list_of("List__DealID", "DealID"))
    ts.accumulate(list_of("List__Bytes", "Bytes"))
    ts.accumulate(
        struct(
            "FilterEstimate",
            field("PositionEstimate", "BigInt"),
            field("VelocityEstimate", "BigInt"),
        )
    )
    ts.accumulate(map_of("Map__BitField", "BitField"))
    ts.accumulate(map_of("Map__BalanceTable", "TokenAmount", key="RawAddress"))
    ts.accumulate(map_of("Map__DataCap", "DataCap", key="RawAddress"))
