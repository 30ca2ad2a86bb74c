"""
Actor-level views over the raw shard readers.

These mirror the abstract data types the v0 actors persist:

- Map      : a HAMT keyed by raw bytes (as_map)
- Array    : an AMT indexed by uint (as_array)
- Multimap : a HAMT whose values are AMT roots (as_multimap)
- Set      : a HAMT whose keys are the members and whose values are empty (as_set)

Notes:
    - Every view is read-only and lazily loaded; nested roots are opened only when
      iteration reaches them.
    - A multimap value that is not a link is reported as StructureError: the outer
      HAMT is well formed but does not hold what a multimap must hold.
"""

from __future__ import annotations

from collections.abc import Iterator

from multiformats import CID

from ..core.constants import HAMT_BIT_WIDTH
from ..core.errors import DecodeError, StructureError
from .amt import Amt, load_amt
from .blockstore import Blockstore
from .hamt import Hamt, load_hamt

__all__ = [
    "Multimap",
    "Set",
    "as_map",
    "as_array",
    "as_multimap",
    "as_set",
]


def as_map(store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> Hamt:
    """Open a HAMT-backed map."""
    return load_hamt(store, root, bit_width)


def as_array(store: Blockstore, root: CID) -> Amt:
    """Open an AMT-backed array."""
    return load_amt(store, root)


class Multimap:
    """HAMT of AMT roots; iteration yields (raw key, opened Amt)."""

    def __init__(self, store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> None:
        self.store = store
        self._outer = load_hamt(store, root, bit_width)

    @property
    def root(self) -> CID:
        return self._outer.root

    def items(self) -> Iterator[tuple[bytes, Amt]]:
        for key, value in self._outer.items():
            try:
                inner = value.as_cid()
            except DecodeError as exc:
                raise StructureError(f"multimap {self.root} value is not an AMT link") from exc
            yield key, load_amt(self.store, inner)

    def keys(self) -> Iterator[bytes]:
        return self._outer.keys()

    def __iter__(self) -> Iterator[tuple[bytes, Amt]]:
        return self.items()


class Set:
    """HAMT used as a set; only the keys carry information."""

    def __init__(self, store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> None:
        self._hamt = load_hamt(store, root, bit_width)

    @property
    def root(self) -> CID:
        return self._hamt.root

    def keys(self) -> Iterator[bytes]:
        return self._hamt.keys()

    def __iter__(self) -> Iterator[bytes]:
        return self.keys()


def as_multimap(store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> Multimap:
    """Open a HAMT of AMT roots."""
    return Multimap(store, root, bit_width)


def as_set(store: Blockstore, root: CID, bit_width: int = HAMT_BIT_WIDTH) -> Set:
    """Open a HAMT-backed set."""
    return Set(store, root, bit_width)
