"""
Declarative catalog of Filecoin v0 actor state types.

Notes:
    - Each module contributes an ``accumulate(ts)`` function; TYPE_SYSTEM is assembled
      and validated once at import and is read-only afterwards.
    - Types are data, not logic: decoding behaviour is selected by
      statediff.decode.registry, never by inspecting type names.
"""

from __future__ import annotations

from ..builder import Prototype
from ..types import TypeSystem
from . import builtin, common, lotus, market, miner, multisig, power

__all__ = [
    "TYPE_SYSTEM",
    "prototype",
    "list_types",
]


def _build() -> TypeSystem:
    ts = TypeSystem()
    for module in (common, lotus, builtin, market, miner, multisig, power):
        module.accumulate(ts)
    ts.freeze()
    return ts


# Registry
TYPE_SYSTEM: TypeSystem = _build()


def prototype(name: str) -> Prototype:
    """
    Look up the prototype for a catalog type.

    Args:
        name (str): Schema type name, e.g. "MinerV0State".

    Returns:
        Prototype: Factory for builders of that type.

    Raises:
        ResolutionError: If no such type is declared.
    """
    return TYPE_SYSTEM.prototype(name)


def list_types() -> list[str]:
    """Return all declared type names in declaration order."""
    return [t.name for t in TYPE_SYSTEM]
