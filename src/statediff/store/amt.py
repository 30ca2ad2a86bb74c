"""
Read-only AMT (array mapped trie) reader.

Supports the go-amt-ipld layouts used by actor state:

    v2 root = [height, count, Node]               (width fixed at 8)
    v3 root = [bit_width, height, count, Node]    (width = 2**bit_width)
    Node    = [bmap: bytes, links: [CID, ...], values: [any, ...]]

Bit ``i`` of ``bmap`` (least-significant bit first within each byte) marks slot ``i`` as
occupied. Leaves (height 0) hold values; inner nodes hold links, each covering
``width**height`` indices.

Notes
- Iteration yields ascending indices using an explicit stack.
- The number of yielded entries is checked against the root count once iteration ends.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from multiformats import CID

from ..core.constants import AMT_V2_WIDTH
from ..core.errors import DecodeError, StructureError
from . import cbor
from .blockstore import Blockstore
from .cbor import Deferred

__all__ = [
    "Amt",
    "load_amt",
]

logger = logging.getLogger(__name__)

_MAX_HEIGHT = 64


def _is_uint(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


def _occupied(bmap: bytes, width: int) -> list[int]:
    return [i for i in range(width) if (bmap[i // 8] >> (i % 8)) & 1]


class Amt:
    """
    Lazily-read AMT rooted at a CID.

    Attributes:
        root (CID): Root block CID.
        width (int): Node fan-out.
        height (int): Height of the root node (0 = the root is a leaf).
        count (int): Number of entries recorded in the root.
    """

    def __init__(self, store: Blockstore, root: CID) -> None:
        self.store = store
        self.root = root
        obj = self._decode(root)
        if isinstance(obj, list) and len(obj) == 3:
            height, count, node = obj
            width = AMT_V2_WIDTH
        elif isinstance(obj, list) and len(obj) == 4:
            bit_width, height, count, node = obj
            if not _is_uint(bit_width) or not 1 <= bit_width <= 16:
                raise StructureError(f"AMT root {root} has invalid bit width {bit_width!r}")
            width = 1 << bit_width
        else:
            raise StructureError(f"AMT root {root} is not a [height, count, node] tuple")
        if not _is_uint(height) or height > _MAX_HEIGHT or not _is_uint(count):
            raise StructureError(f"AMT root {root} has invalid height or count")
        self.width = width
        self.height = height
        self.count = count
        self._root_node = node

    def _decode(self, cid: CID) -> Any:
        try:
            return cbor.decode(self.store.get(cid))
        except DecodeError as exc:
            raise StructureError(f"AMT block {cid} is not valid CBOR: {exc}") from exc

    def _parse(self, node: Any, height: int, where: CID) -> tuple[list[int], list[Any]]:
        if not isinstance(node, list) or len(node) != 3:
            raise StructureError(f"AMT node in {where} is not a [bmap, links, values] tuple")
        bmap, links, values = node
        if (
            not isinstance(bmap, bytes)
            or len(bmap) != (self.width + 7) // 8
            or not isinstance(links, list)
            or not isinstance(values, list)
        ):
            raise StructureError(f"AMT node in {where} is malformed")
        slots = _occupied(bmap, self.width)
        entries, other = (values, links) if height == 0 else (links, values)
        if other or len(slots) != len(entries):
            raise StructureError(
                f"AMT node in {where} at height {height} has {len(slots)} bits set for "
                f"{len(links)} links and {len(values)} values"
            )
        return slots, entries

    def items(self) -> Iterator[tuple[int, Deferred]]:
        """Yield every (index, deferred value) pair once, in ascending index order."""
        stack: list[tuple[Any, int, int, CID]] = [(self._root_node, self.height, 0, self.root)]
        seen = 0
        while stack:
            node, height, offset, where = stack.pop()
            if isinstance(node, CID):
                logger.debug("descending into AMT node %s", node)
                where = node
                node = self._decode(node)
            slots, entries = self._parse(node, height, where)
            if height == 0:
                for slot, value in zip(slots, entries):
                    seen += 1
                    yield offset + slot, Deferred(value)
                continue
            span = self.width**height
            for slot, link in reversed(list(zip(slots, entries))):
                if not isinstance(link, CID):
                    raise StructureError(f"AMT node in {where} holds a non-CID link")
                stack.append((link, height - 1, offset + slot * span, where))
        if seen != self.count:
            raise StructureError(
                f"AMT {self.root} root records {self.count} entries but holds {seen}"
            )

    def __iter__(self) -> Iterator[tuple[int, Deferred]]:
        return self.items()


def load_amt(store: Blockstore, root: CID) -> Amt:
    """
    Open an AMT, reading and validating its root block.

    Raises:
        BlockNotFound: If the root block is missing.
        StructureError: If the root is not a valid AMT root.
    """
    return Amt(store, root)
