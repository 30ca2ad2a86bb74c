"""
statediff.codec: typed node → token stream → text.

## Responsibilities
- Token model and sinks (tokens).
- The link-aware streaming marshaler with Filecoin scalar rendering (marshal).
- Pretty-printed JSON text rendering (json).

## Import DAG discipline
- Depends on statediff.core, statediff.schema and statediff.config.
- Link loaders are injected; this package never imports statediff.decode.
"""

from __future__ import annotations

from .json import JsonSink, render_json
from .marshal import DagMarshaler, Loader, marshal
from .tokens import ListSink, Token, TokenKind, TokenSink

__all__ = [
    "TokenKind",
    "Token",
    "TokenSink",
    "ListSink",
    "Loader",
    "DagMarshaler",
    "marshal",
    "JsonSink",
    "render_json",
]
