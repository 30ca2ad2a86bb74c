"""
Pretty-printed JSON text from a token stream.

JsonSink writes the same layout json.dumps(..., indent=n) produces, one token at a time,
so arbitrarily large state renders without building an intermediate dict.

Notes:
    - Strings are escaped with json.dumps.
    - The sink validates the stream: keys must be strings, closes must match opens,
      declared container lengths must match the entries seen, and nothing may follow the
      top-level value. Violations raise MarshalError.
"""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from typing import TextIO

from ..config import Settings
from ..core.constants import JSON_INDENT
from ..core.errors import MarshalError
from ..schema.nodes import Node
from .marshal import DagMarshaler, Loader
from .tokens import Token, TokenKind

__all__ = [
    "JsonSink",
    "render_json",
]


@dataclass
class _Frame:
    is_map: bool
    declared: int
    count: int = 0
    expect_key: bool = True


_SCALARS = frozenset(
    {TokenKind.STRING, TokenKind.INT, TokenKind.FLOAT64, TokenKind.BOOL, TokenKind.NULL}
)


class JsonSink:
    """
    Token sink rendering JSON text to a stream.

    Examples:
        >>> buf = io.StringIO()
        >>> sink = JsonSink(buf, indent=2)
        >>> for t in (Token.map_open(1), Token.string("a"), Token.int_(1), Token.map_close()):
        ...     sink.step(t)
        >>> print(buf.getvalue())
        {
          "a": 1
        }
    """

    def __init__(self, stream: TextIO, indent: int = JSON_INDENT) -> None:
        self.stream = stream
        self.indent = " " * indent
        self._stack: list[_Frame] = []
        self._done = False

    @property
    def done(self) -> bool:
        """True once a complete top-level value has been written."""
        return self._done

    def close(self) -> None:
        """Check that the stream held exactly one complete value."""
        if not self._done:
            raise MarshalError("token stream ended before the value was complete")

    def step(self, token: Token) -> None:
        if self._done:
            raise MarshalError(f"unexpected {token.kind.value} token after the top-level value")
        kind = token.kind
        if kind is TokenKind.MAP_CLOSE or kind is TokenKind.ARR_CLOSE:
            self._close(token)
            return
        frame = self._stack[-1] if self._stack else None
        if frame is not None and frame.is_map and frame.expect_key:
            if kind is not TokenKind.STRING:
                raise MarshalError(f"map key must be a string token, got {kind.value}")
            self._newline_item(frame)
            self.stream.write(json.dumps(token.value) + ": ")
            frame.expect_key = False
            return
        if frame is not None and not frame.is_map:
            self._newline_item(frame)
        if kind is TokenKind.MAP_OPEN or kind is TokenKind.ARR_OPEN:
            self._stack.append(_Frame(is_map=kind is TokenKind.MAP_OPEN, declared=token.length))
            self.stream.write("{" if kind is TokenKind.MAP_OPEN else "[")
            return
        if kind not in _SCALARS:
            raise MarshalError(f"unknown token kind {kind!r}")
        self.stream.write(self._scalar(token))
        self._value_done()

    def _scalar(self, token: Token) -> str:
        kind = token.kind
        if kind is TokenKind.NULL:
            return "null"
        if kind is TokenKind.BOOL:
            return "true" if token.value else "false"
        if kind is TokenKind.INT:
            return str(int(token.value))
        if kind is TokenKind.FLOAT64:
            return json.dumps(float(token.value))
        return json.dumps(token.value)

    def _newline_item(self, frame: _Frame) -> None:
        if frame.count:
            self.stream.write(",")
        self.stream.write("\n" + self.indent * len(self._stack))

    def _value_done(self) -> None:
        if not self._stack:
            self._done = True
            return
        frame = self._stack[-1]
        frame.count += 1
        frame.expect_key = True

    def _close(self, token: Token) -> None:
        want_map = token.kind is TokenKind.MAP_CLOSE
        if not self._stack or self._stack[-1].is_map is not want_map:
            raise MarshalError(f"unbalanced {token.kind.value} token")
        frame = self._stack[-1]
        if frame.is_map and not frame.expect_key:
            raise MarshalError("map closed between a key and its value")
        if frame.declared >= 0 and frame.declared != frame.count:
            raise MarshalError(
                f"container declared {frame.declared} entries but held {frame.count}"
            )
        self._stack.pop()
        if frame.count:
            self.stream.write("\n" + self.indent * len(self._stack))
        self.stream.write("}" if frame.is_map else "]")
        self._value_done()


def render_json(
    node: Node, loader: Loader | None = None, settings: Settings | None = None
) -> str:
    """
    Render ``node`` as pretty-printed JSON text.

    Args:
        node (Node): Node to render.
        loader (Loader | None): Optional link loader (see DagMarshaler).
        settings (Settings | None): Network prefix and indentation.

    Returns:
        str: JSON document without a trailing newline.
    """
    settings = settings or Settings()
    buf = io.StringIO()
    sink = JsonSink(buf, indent=settings.json_indent)
    DagMarshaler(loader, settings).marshal_recursive(node, sink)
    sink.close()
    return buf.getvalue()
