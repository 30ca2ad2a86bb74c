"""
Core package aggregator for statediff contracts (errors, constants, scalar codecs).

## Contracts (single source of truth)
- Errors: ResolutionError, DecodeError, StructureError, MarshalError, SchemaError.
- Constants: shard geometry and rendering defaults.
- Scalar codecs: address rendering, RLE+ bitfields, big-endian keys and varints.

## Notes
- Zero-IO policy: no block store or filesystem access happens in this package.
- Everything here is consumed by statediff.schema, statediff.store, statediff.decode and
  statediff.codec; nothing here imports those layers.

## Examples
```python
from statediff.core.bitfield import BitField
from statediff.core.numbers import uint_key_string

BitField.from_set([0, 2, 5]).to_bytes().hex()
uint_key_string(b"\\x30\\x39")  # '12345'
```
"""

from __future__ import annotations

from .errors import (
    BlockNotFound,
    DecodeError,
    MarshalError,
    ResolutionError,
    SchemaError,
    StatediffError,
    StructureError,
)

__all__ = [
    "StatediffError",
    "ResolutionError",
    "DecodeError",
    "StructureError",
    "BlockNotFound",
    "MarshalError",
    "SchemaError",
]
