"""
Lightweight typing aliases used across the decode and codec layers.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from statediff.core.typing import TypeKey, PathSegment
    >>> def child(parent: TypeKey, field: str) -> str:
    ...     return f"{parent}.{field}"
    >>> child(TypeKey("storageMinerActor"), "Info")
    'storageMinerActor.Info'
"""

from __future__ import annotations

from typing import NewType, Union

__all__ = [
    "TypeKey",
    "PathSegment",
    "Path",
]

# Canonical output of statediff.decode.resolver.resolve_type.
TypeKey = NewType("TypeKey", str)

# A traversal path as accumulated by the marshaler: map keys are str, list indices int.
PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]
