"""
Top-level entry points: decode a CID as a named type, and a path-driven link loader.

Examples:
    >>> from statediff.store import MemoryBlockstore
    >>> bs = MemoryBlockstore()
    >>> c = bs.put_object([b"\\x00\\x01"])
    >>> transform(c, bs, "accountActor").type_name
    'AccountV0State'
"""

from __future__ import annotations

import logging

from multiformats import CID

from ..config import Settings
from ..core.errors import ResolutionError
from ..core.typing import Path
from ..schema.catalog import TYPE_SYSTEM
from ..schema.nodes import Node
from ..store.blockstore import Blockstore
from .loaders import load
from .registry import PROTOTYPES, lookup
from .resolver import resolve_type

__all__ = [
    "transform",
    "type_path_for",
    "TransformLoader",
]

logger = logging.getLogger(__name__)


def transform(
    cid: CID, store: Blockstore, type_path: str, settings: Settings | None = None
) -> Node:
    """
    Decode the value at ``cid`` as the type named by ``type_path``.

    Args:
        cid (CID): Root of the value.
        store (Blockstore): Source of blocks.
        type_path (str): Any type path; resolved with resolve_type.
        settings (Settings | None): Optional runtime settings.

    Returns:
        Node: The fully built, immutable node.

    Raises:
        ResolutionError: ``"unknown type: <type_path>"`` when the path is not registered.
        DecodeError | StructureError: Propagated unchanged from load().
    """
    key = resolve_type(type_path)
    try:
        entry = lookup(key)
    except ResolutionError:
        raise ResolutionError(f"unknown type: {type_path}") from None
    builder = TYPE_SYSTEM.prototype(entry.prototype).new_builder()
    load(cid, store, builder, settings)
    return builder.build()


def type_path_for(root_type: str, path: Path) -> str:
    """
    Render a marshaler path below ``root_type`` as a type path.

    Examples:
        >>> type_path_for("storageMinerActor", ("Deadlines", "Due", 3))
        'storageMinerActor.Deadlines.Due[3]'
    """
    parts = [root_type]
    for seg in path:
        parts.append(f"[{seg}]" if isinstance(seg, int) else f".{seg}")
    return "".join(parts)


class TransformLoader:
    """
    Link loader that decodes every link whose path resolves to a registered type.

    Intended as the ``loader`` of a DagMarshaler marshaling a node decoded as
    ``root_type``: links are inlined wherever transform() can decode them.
    """

    def __init__(
        self, store: Blockstore, root_type: str, settings: Settings | None = None
    ) -> None:
        self.store = store
        self.root_type = root_type
        self.settings = settings

    def __call__(self, cid: CID, path: Path) -> Node | None:
        type_path = type_path_for(self.root_type, path)
        if resolve_type(type_path) not in PROTOTYPES:
            logger.debug("leaving link %s at %s unresolved", cid, type_path)
            return None
        return transform(cid, self.store, type_path, self.settings)
