"""
statediff.decode: type-directed decoding of actor state.

## Responsibilities
- Reduce type paths to type keys (resolver).
- Bind type keys to prototypes and prototypes to structure decoders (registry).
- Materialize flat and sharded values into typed nodes (loaders).
- Offer transform() and the path-driven TransformLoader (transform).

## Import DAG discipline
- Depends on statediff.core, statediff.schema, statediff.store and statediff.config.
- MUST NOT import statediff.codec.
"""

from __future__ import annotations

from .loaders import load
from .registry import (
    PROTOTYPES,
    STRUCTURE_DECODERS,
    KeyEncoding,
    RegistryEntry,
    Shape,
    StructureDecoder,
    ValueMode,
    list_type_keys,
    lookup,
)
from .resolver import ALIASES, LotusType, actor_type_for_code, resolve_type
from .transform import TransformLoader, transform, type_path_for

__all__ = [
    "LotusType",
    "ALIASES",
    "resolve_type",
    "actor_type_for_code",
    "Shape",
    "KeyEncoding",
    "ValueMode",
    "StructureDecoder",
    "RegistryEntry",
    "PROTOTYPES",
    "STRUCTURE_DECODERS",
    "lookup",
    "list_type_keys",
    "load",
    "transform",
    "type_path_for",
    "TransformLoader",
]
