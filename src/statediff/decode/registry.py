"""
Static registry binding type keys to prototypes and prototypes to structure decoders.

Two read-only tables are built at import:

- PROTOTYPES: TypeKey → prototype (schema type) name
- STRUCTURE_DECODERS: prototype name → StructureDecoder

A prototype without a StructureDecoder is FLAT_CBOR: its value is one dag-cbor block.
A StructureDecoder describes how a sharded structure maps onto a schema map:

| Shape             | Source                    | Keys                  | Values                      |
|-------------------|---------------------------|-----------------------|-----------------------------|
| HAMT_MAP          | HAMT                      | STRING/BIG_ENDIAN_UINT| NODE, BYTES or INT          |
| SHARDED_ARRAY_MAP | AMT                       | INDEX                 | NODE or BYTES               |
| MULTIMAP          | HAMT of AMT roots         | BIG_ENDIAN_UINT       | inner map index → NODE      |
| SET_OF_UINT_MAP   | HAMT of Set (HAMT) roots  | BIG_ENDIAN_UINT       | list of uvarint set members |

Notes:
    - Several keys share one prototype (the bitfield maps, both balance tables, both
      datacap tables), and therefore one decoder.
    - Tables are validated against the catalog at import; a bad binding fails the import.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.constants import HAMT_BIT_WIDTH
from ..core.errors import ResolutionError, SchemaError
from ..core.typing import TypeKey
from ..schema.catalog import TYPE_SYSTEM
from ..schema.types import ListType, MapType
from .resolver import LotusType

__all__ = [
    "Shape",
    "KeyEncoding",
    "ValueMode",
    "StructureDecoder",
    "RegistryEntry",
    "PROTOTYPES",
    "STRUCTURE_DECODERS",
    "lookup",
    "list_type_keys",
]


class Shape(str, Enum):
    FLAT_CBOR = "flat_cbor"
    HAMT_MAP = "hamt_map"
    SHARDED_ARRAY_MAP = "sharded_array_map"
    MULTIMAP = "multimap"
    SET_OF_UINT_MAP = "set_of_uint_map"


class KeyEncoding(str, Enum):
    # Raw key bytes handed to the map key type unchanged.
    STRING = "string"
    # Decimal string of the key bytes read as an unsigned big-endian integer.
    BIG_ENDIAN_UINT = "big_endian_uint"
    # Decimal string of the AMT index.
    INDEX = "index"


class ValueMode(str, Enum):
    # Shard value decoded as a node of the element type.
    NODE = "node"
    # Shard value is a CBOR byte string; its content is assigned.
    BYTES = "bytes"
    # Shard value is a CBOR integer.
    INT = "int"


@dataclass(frozen=True, slots=True)
class StructureDecoder:
    """
    Declarative description of one sharded structure.

    Attributes:
        shape (Shape): Which reader and traversal to use.
        key_encoding (KeyEncoding): How raw shard keys become map keys.
        value_mode (ValueMode): How shard values are interpreted.
        element (str): Schema type of each leaf value.
        bit_width (int): HAMT bit width (ignored for AMT-only shapes).
    """

    shape: Shape
    key_encoding: KeyEncoding
    value_mode: ValueMode
    element: str
    bit_width: int = HAMT_BIT_WIDTH


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    key: TypeKey
    prototype: str
    decoder: StructureDecoder | None

    @property
    def shape(self) -> Shape:
        return self.decoder.shape if self.decoder is not None else Shape.FLAT_CBOR


def _hamt(keys: KeyEncoding, values: ValueMode, element: str) -> StructureDecoder:
    return StructureDecoder(Shape.HAMT_MAP, keys, values, element)


def _amt(values: ValueMode, element: str) -> StructureDecoder:
    return StructureDecoder(Shape.SHARDED_ARRAY_MAP, KeyEncoding.INDEX, values, element)


# Registry
PROTOTYPES: dict[TypeKey, str] = {
    TypeKey(k.value): proto
    for k, proto in (
        (LotusType.TIPSET, "LotusBlockHeader"),
        (LotusType.ACCOUNT_ACTOR, "AccountV0State"),
        (LotusType.CRON_ACTOR, "CronV0State"),
        (LotusType.INIT_ACTOR, "InitV0State"),
        (LotusType.MARKET_ACTOR, "MarketV0State"),
        (LotusType.MULTISIG_ACTOR, "MultisigV0State"),
        (LotusType.MINER_ACTOR, "MinerV0State"),
        (LotusType.MINER_INFO, "MinerV0Info"),
        (LotusType.MINER_VESTING_FUNDS, "MinerV0VestingFunds"),
        (LotusType.MINER_ALLOCATED_SECTORS, "BitField"),
        (LotusType.MINER_DEADLINES, "MinerV0Deadlines"),
        (LotusType.MINER_DEADLINE, "MinerV0Deadline"),
        (LotusType.POWER_ACTOR, "PowerV0State"),
        (LotusType.REWARD_ACTOR, "RewardV0State"),
        (LotusType.VERIFREG_ACTOR, "VerifregV0State"),
        (LotusType.PAYCH_ACTOR, "PaychV0State"),
        # Sharded structures
        (LotusType.STATE_ROOT, "Map__LotusActors"),
        (LotusType.INIT_ACTOR_ADDRESSES, "Map__ActorID"),
        (LotusType.MINER_PRECOMMITTED_SECTORS, "Map__SectorPreCommitOnChainInfo"),
        (LotusType.MINER_PARTITION_EARLY_TERMINATED, "Map__BitField"),
        (LotusType.MINER_PRECOMMITTED_SECTORS_EXPIRY, "Map__BitField"),
        (LotusType.MINER_SECTORS, "Map__SectorOnChainInfo"),
        (LotusType.MINER_DEADLINE_PARTITIONS, "Map__MinerV0Partition"),
        (LotusType.MINER_PARTITION_EXPIRY, "Map__MinerV0ExpirationSet"),
        (LotusType.MINER_DEADLINE_EXPIRY, "Map__BitField"),
        (LotusType.POWER_CRON_EVENT_QUEUE, "Map__PowerV0CronEvent"),
        (LotusType.POWER_CLAIMS, "Map__PowerV0Claim"),
        (LotusType.VERIFREG_VERIFIERS, "Map__DataCap"),
        (LotusType.VERIFREG_VERIFIED_CLIENTS, "Map__DataCap"),
        (LotusType.MARKET_PROPOSALS, "Map__MarketV0DealProposal"),
        (LotusType.MARKET_PENDING_PROPOSALS, "Map__MarketV0PendingProposal"),
        (LotusType.MARKET_STATES, "Map__MarketV0DealState"),
        (LotusType.MARKET_ESCROW_TABLE, "Map__BalanceTable"),
        (LotusType.MARKET_LOCKED_TABLE, "Map__BalanceTable"),
        (LotusType.MARKET_DEAL_OPS_BY_EPOCH, "Map__List__DealID"),
        (LotusType.MULTISIG_PENDING_TXNS, "Map__MultisigV0Transaction"),
        (LotusType.PAYCH_LANE_STATES, "Map__PaychV0LaneState"),
    )
}

STRUCTURE_DECODERS: dict[str, StructureDecoder] = {
    "Map__LotusActors": _hamt(KeyEncoding.STRING, ValueMode.NODE, "LotusActors"),
    "Map__ActorID": _hamt(KeyEncoding.STRING, ValueMode.INT, "ActorID"),
    "Map__SectorPreCommitOnChainInfo": _hamt(
        KeyEncoding.BIG_ENDIAN_UINT, ValueMode.NODE, "MinerV0SectorPreCommitOnChainInfo"
    ),
    "Map__BitField": _amt(ValueMode.BYTES, "BitField"),
    "Map__SectorOnChainInfo": _amt(ValueMode.NODE, "MinerV0SectorOnChainInfo"),
    "Map__MinerV0Partition": _amt(ValueMode.NODE, "MinerV0Partition"),
    "Map__MinerV0ExpirationSet": _amt(ValueMode.NODE, "MinerV0ExpirationSet"),
    "Map__PowerV0CronEvent": StructureDecoder(
        Shape.MULTIMAP, KeyEncoding.BIG_ENDIAN_UINT, ValueMode.NODE, "PowerV0CronEvent"
    ),
    "Map__PowerV0Claim": _hamt(KeyEncoding.STRING, ValueMode.NODE, "PowerV0Claim"),
    "Map__DataCap": _hamt(KeyEncoding.STRING, ValueMode.BYTES, "DataCap"),
    "Map__MarketV0DealProposal": _amt(ValueMode.NODE, "MarketV0DealProposal"),
    "Map__MarketV0PendingProposal": _hamt(
        KeyEncoding.STRING, ValueMode.NODE, "MarketV0DealProposal"
    ),
    "Map__MarketV0DealState": _amt(ValueMode.NODE, "MarketV0DealState"),
    "Map__BalanceTable": _hamt(KeyEncoding.STRING, ValueMode.BYTES, "TokenAmount"),
    "Map__List__DealID": StructureDecoder(
        Shape.SET_OF_UINT_MAP, KeyEncoding.BIG_ENDIAN_UINT, ValueMode.INT, "DealID"
    ),
    "Map__MultisigV0Transaction": _hamt(
        KeyEncoding.BIG_ENDIAN_UINT, ValueMode.NODE, "MultisigV0Transaction"
    ),
    "Map__PaychV0LaneState": _amt(ValueMode.NODE, "PaychV0LaneState"),
}


def _leaf_type(map_name: str, shape: Shape) -> str:
    t = TYPE_SYSTEM.get(map_name)
    if not isinstance(t, MapType):
        raise SchemaError(f"{map_name}: sharded structures decode into maps")
    value = TYPE_SYSTEM.get(t.value)
    if shape is Shape.MULTIMAP:
        if not isinstance(value, MapType):
            raise SchemaError(f"{map_name}: multimap values must be maps")
        return value.value
    if shape is Shape.SET_OF_UINT_MAP:
        if not isinstance(value, ListType):
            raise SchemaError(f"{map_name}: set-of-uint values must be lists")
        return value.value
    return value.name


def _check_tables() -> None:
    for proto in PROTOTYPES.values():
        TYPE_SYSTEM.get(proto)
    for proto, dec in STRUCTURE_DECODERS.items():
        leaf = _leaf_type(proto, dec.shape)
        if leaf != dec.element:
            raise SchemaError(f"{proto}: decoder element {dec.element} != schema {leaf}")
        if dec.shape is Shape.SHARDED_ARRAY_MAP and dec.key_encoding is not KeyEncoding.INDEX:
            raise SchemaError(f"{proto}: array maps are keyed by index")


_check_tables()


def lookup(key: str) -> RegistryEntry:
    """
    Look up the registry entry for a resolved type key.

    Args:
        key (str): TypeKey produced by resolve_type.

    Returns:
        RegistryEntry: Prototype name and optional structure decoder.

    Raises:
        ResolutionError: If the key is not registered.
    """
    try:
        proto = PROTOTYPES[TypeKey(key)]
    except KeyError:
        raise ResolutionError(f"unknown type: {key}") from None
    return RegistryEntry(TypeKey(key), proto, STRUCTURE_DECODERS.get(proto))


def list_type_keys() -> list[TypeKey]:
    """Return all registered type keys in registry order."""
    return list(PROTOTYPES)
