"""
Streaming marshaler: typed node → token stream.

The output resembles dag-json with Filecoin-specific rendering:

- RAW_ADDRESS / CID_STRING strings (usually map keys) render as address / CID strings.
- ADDRESS bytes render as the address string, BIG_INT bytes as a decimal string.
- BITFIELD bytes render as ``{"_type": "bitfield", "bytes": "<hex of CBOR-wrapped canonical RLE+>"}``.
- Other bytes render as standard base64.
- Links are inlined when the loader resolves them, otherwise emitted as
  ``{"/": "<cid>"}``.

Traversal
- Depth-first using an explicit stack of frames; each container contributes one lazy
  frame, so nesting depth never touches the Python recursion limit.
- The path handed to the loader grows by the rendered key for map entries and by the
  integer index for list items. An inlined link keeps the path of the link itself.

Errors
- Absent nodes, non-CID links and scalars that fail to render raise MarshalError.
- Anything a sink raises propagates immediately; no further tokens are emitted.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Iterator
from typing import Union

from multiformats import CID

from ..config import Settings
from ..core.address import address_to_string
from ..core.bitfield import BitField
from ..core.errors import DecodeError, MarshalError
from ..core.numbers import big_endian_uint
from ..core.typing import Path
from ..schema.kinds import Kind, Tag
from ..schema.nodes import BytesNode, LinkNode, Node, StringNode
from .tokens import Token, TokenSink

__all__ = [
    "Loader",
    "DagMarshaler",
    "marshal",
]

# (cid, path) -> node to inline, or None to emit the link itself.
Loader = Callable[[CID, Path], Union[Node, None]]

_Work = Union[Token, tuple[Node, Path]]

_END = object()


class DagMarshaler:
    """
    Link-aware marshaler.

    Args:
        loader (Loader | None): Resolves links to nodes; None never inlines.
        settings (Settings | None): Rendering settings (address network prefix).

    Examples:
        >>> from statediff.codec.tokens import ListSink
        >>> from statediff.schema.nodes import IntNode
        >>> sink = ListSink()
        >>> DagMarshaler().marshal_recursive(IntNode("Int", 5), sink)
        >>> sink.tokens[0].value
        5
    """

    def __init__(self, loader: Loader | None = None, settings: Settings | None = None) -> None:
        self.loader = loader
        self.settings = settings or Settings()

    def marshal_recursive(self, node: Node, sink: TokenSink, path: Path = ()) -> None:
        stack: list[Iterator[_Work]] = [iter([(node, path)])]
        while stack:
            item = next(stack[-1], _END)
            if item is _END:
                stack.pop()
                continue
            if isinstance(item, Token):
                sink.step(item)
                continue
            frame = self._step(item[0], item[1], sink)
            if frame is not None:
                stack.append(frame)

    # -- per-node dispatch -----------------------------------------------

    def _step(self, node: Node, path: Path, sink: TokenSink) -> Iterator[_Work] | None:
        """Emit what ``node`` emits up front; return a frame for whatever follows."""
        kind = node.kind
        if kind is Kind.INVALID:
            raise MarshalError("cannot traverse a node that is absent")
        if kind is Kind.NULL:
            sink.step(Token.null())
        elif kind is Kind.MAP:
            sink.step(Token.map_open(node.length))
            return self._map_frame(node, path)
        elif kind is Kind.LIST:
            sink.step(Token.arr_open(node.length))
            return self._list_frame(node, path)
        elif kind is Kind.BOOL:
            sink.step(Token.bool_(node.value))
        elif kind is Kind.INT:
            sink.step(Token.int_(node.value))
        elif kind is Kind.FLOAT:
            sink.step(Token.float64(node.value))
        elif kind is Kind.STRING:
            sink.step(Token.string(self._render_string(node)))
        elif kind is Kind.BYTES:
            return self._bytes(node, sink)
        elif kind is Kind.LINK:
            return self._link(node, path, sink)
        else:
            raise AssertionError(f"unhandled node kind {kind!r}")
        return None

    def _map_frame(self, node: Node, path: Path) -> Iterator[_Work]:
        for key, value in node.map_items():
            rendered = self._render_string(key)
            yield Token.string(rendered)
            yield value, path + (rendered,)
        yield Token.map_close()

    def _list_frame(self, node: Node, path: Path) -> Iterator[_Work]:
        for i, value in enumerate(node.list_items()):
            yield value, path + (i,)
        yield Token.arr_close()

    def _link(self, node: LinkNode, path: Path, sink: TokenSink) -> Iterator[_Work] | None:
        target = node.target
        if not isinstance(target, CID):
            raise MarshalError("link emission only supported for CID-typed links")
        if self.loader is not None:
            resolved = self.loader(target, path)
            if resolved is not None:
                return iter([(resolved, path)])
        sink.step(Token.map_open(1))
        sink.step(Token.string("/"))
        sink.step(Token.string(str(target)))
        sink.step(Token.map_close())
        return None

    # -- scalar rendering ------------------------------------------------

    def _render_string(self, node: StringNode) -> str:
        try:
            if node.tag is Tag.RAW_ADDRESS:
                return address_to_string(node.raw_bytes(), self.settings.network)
            if node.tag is Tag.CID_STRING:
                return str(CID.decode(node.raw_bytes()))
        except (DecodeError, ValueError, KeyError) as exc:
            raise MarshalError(f"cannot render {node.type_name} value: {exc}") from exc
        return node.value

    def _bytes(self, node: BytesNode, sink: TokenSink) -> Iterator[_Work] | None:
        raw = node.value
        try:
            if node.tag is Tag.BITFIELD:
                encoded = BitField.decode(raw).to_cbor().hex()
            elif node.tag is Tag.ADDRESS:
                text = address_to_string(raw, self.settings.network)
            elif node.tag is Tag.BIG_INT:
                text = str(big_endian_uint(raw))
            else:
                text = base64.b64encode(raw).decode("ascii")
        except DecodeError as exc:
            raise MarshalError(f"cannot render {node.type_name} value: {exc}") from exc
        if node.tag is not Tag.BITFIELD:
            sink.step(Token.string(text))
            return None
        sink.step(Token.map_open(2))
        return iter(
            [
                Token.string("_type"),
                Token.string("bitfield"),
                Token.string("bytes"),
                Token.string(encoded),
                Token.map_close(),
            ]
        )


def marshal(node: Node, sink: TokenSink) -> None:
    """Marshal ``node`` without resolving links."""
    DagMarshaler().marshal_recursive(node, sink)
