"""
Structure decoders: materialize a sharded or flat value into a NodeBuilder.

load() picks the decoder registered for the builder's prototype and dispatches on its
Shape. Each shape decoder opens one map assembler (a map of maps for MULTIMAP, a map of
lists for SET_OF_UINT_MAP), visits every shard entry exactly once in native order, and
finishes the assembler only after the source is drained.

Failure semantics
- Bad block bytes or schema mismatches raise DecodeError; missing blocks and corrupt
  shard indexes raise StructureError. Both propagate unchanged.
- The first failing entry aborts the whole container: the assembler is never finished,
  so build() on the caller's builder refuses to produce a partial node.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from multiformats import CID

from ..config import Settings
from ..core.errors import DecodeError
from ..core.numbers import decode_uvarint, uint_key_string
from ..schema.builder import NodeBuilder
from ..schema.catalog import TYPE_SYSTEM
from ..store.adt import as_array, as_map, as_multimap, as_set
from ..store.blockstore import Blockstore
from ..store.cbor import Deferred
from .registry import STRUCTURE_DECODERS, KeyEncoding, Shape, StructureDecoder, ValueMode

__all__ = [
    "load",
    "set_member_uint",
]

logger = logging.getLogger(__name__)

ShapeLoader = Callable[[CID, Blockstore, NodeBuilder, StructureDecoder, int], None]


def set_member_uint(raw: bytes) -> int:
    """
    Decode a Set member key holding one unsigned varint.

    Raises:
        DecodeError: If the key is not exactly one uvarint.
    """
    value, end = decode_uvarint(raw)
    if end != len(raw):
        raise DecodeError(f"set key has {len(raw) - end} trailing bytes after uvarint")
    return value


def _map_key(raw: bytes, encoding: KeyEncoding) -> str | bytes:
    if encoding is KeyEncoding.BIG_ENDIAN_UINT:
        return uint_key_string(raw)
    return raw


def _assign_value(entry: NodeBuilder, value: Deferred, decoder: StructureDecoder) -> None:
    mode = decoder.value_mode
    if mode is ValueMode.NODE:
        element = TYPE_SYSTEM.prototype(decoder.element).new_builder()
        element.assign_cbor(value.value)
        entry.assign_node(element.build())
    elif mode is ValueMode.BYTES:
        entry.assign_bytes(value.as_bytes())
    else:
        entry.assign_int(value.as_int())


def _load_hamt_map(
    cid: CID, store: Blockstore, builder: NodeBuilder, decoder: StructureDecoder, bit_width: int
) -> None:
    table = as_map(store, cid, bit_width)
    mapper = builder.begin_map()
    count = 0
    for raw_key, value in table.items():
        entry = mapper.assemble_entry(_map_key(raw_key, decoder.key_encoding))
        _assign_value(entry, value, decoder)
        count += 1
    mapper.finish()
    logger.debug("decoded %d HAMT entries from %s", count, cid)


def _load_array_map(
    cid: CID, store: Blockstore, builder: NodeBuilder, decoder: StructureDecoder, bit_width: int
) -> None:
    array = as_array(store, cid)
    mapper = builder.begin_map()
    count = 0
    for index, value in array.items():
        _assign_value(mapper.assemble_entry(str(index)), value, decoder)
        count += 1
    mapper.finish()
    logger.debug("decoded %d AMT entries from %s", count, cid)


def _load_multimap(
    cid: CID, store: Blockstore, builder: NodeBuilder, decoder: StructureDecoder, bit_width: int
) -> None:
    multimap = as_multimap(store, cid, bit_width)
    mapper = builder.begin_map()
    count = 0
    for raw_key, array in multimap.items():
        bucket = mapper.assemble_entry(uint_key_string(raw_key)).begin_map()
        for index, value in array.items():
            _assign_value(bucket.assemble_entry(str(index)), value, decoder)
            count += 1
        bucket.finish()
    mapper.finish()
    logger.debug("decoded %d multimap entries from %s", count, cid)


def _load_set_of_uint_map(
    cid: CID, store: Blockstore, builder: NodeBuilder, decoder: StructureDecoder, bit_width: int
) -> None:
    table = as_map(store, cid, bit_width)
    mapper = builder.begin_map()
    count = 0
    for raw_key, value in table.items():
        members = as_set(store, value.as_cid(), bit_width)
        lister = mapper.assemble_entry(uint_key_string(raw_key)).begin_list()
        for member in members.keys():
            lister.assemble_value().assign_int(set_member_uint(member))
            count += 1
        lister.finish()
    mapper.finish()
    logger.debug("decoded %d set members from %s", count, cid)


_SHAPE_LOADERS: dict[Shape, ShapeLoader] = {
    Shape.HAMT_MAP: _load_hamt_map,
    Shape.SHARDED_ARRAY_MAP: _load_array_map,
    Shape.MULTIMAP: _load_multimap,
    Shape.SET_OF_UINT_MAP: _load_set_of_uint_map,
}


def load(
    cid: CID, store: Blockstore, builder: NodeBuilder, settings: Settings | None = None
) -> None:
    """
    Decode the value stored at ``cid`` into ``builder``.

    Args:
        cid (CID): Root of the value (a block, or the root of a sharded structure).
        store (Blockstore): Source of blocks.
        builder (NodeBuilder): Fresh builder; its prototype selects the decoder.
        settings (Settings | None): Overrides the HAMT bit width when given.

    Raises:
        DecodeError: Malformed CBOR or data that does not fit the schema type.
        StructureError: Missing block or corrupt shard structure.
    """
    decoder = STRUCTURE_DECODERS.get(builder.prototype.name)
    if decoder is None:
        logger.debug("loading %s from flat block %s", builder.prototype.name, cid)
        builder.decode_cbor(store.get(cid))
        return
    bit_width = settings.hamt_bit_width if settings is not None else decoder.bit_width
    logger.debug(
        "loading %s from %s as %s", builder.prototype.name, cid, decoder.shape.value
    )
    _SHAPE_LOADERS[decoder.shape](cid, store, builder, decoder, bit_width)
