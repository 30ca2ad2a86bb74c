from __future__ import annotations

import cbor2
import pytest
from multiformats import CID

from statediff.config import Settings
from statediff.core.bitfield import BitField
from statediff.core.errors import MarshalError
from statediff.codec.marshal import DagMarshaler, marshal
from statediff.codec.tokens import ListSink, Token, TokenKind
from statediff.schema.kinds import Tag
from statediff.schema.nodes import (
    ABSENT,
    NULL,
    BoolNode,
    BytesNode,
    FloatNode,
    IntNode,
    LinkNode,
    ListNode,
    MapNode,
    Maybe,
    StringNode,
    StructNode,
)
from statediff.store.blockstore import compute_cid

TARGET = compute_cid(b"target")


def _tokens(node, loader=None, settings=None) -> list[Token]:
    sink = ListSink()
    DagMarshaler(loader, settings).marshal_recursive(node, sink)
    return sink.tokens


def _key(text: str) -> StringNode:
    return StringNode("String", text)


def test_scalars_pass_through() -> None:
    assert _tokens(NULL) == [Token.null()]
    assert _tokens(BoolNode("Bool", True)) == [Token.bool_(True)]
    assert _tokens(IntNode("Int", -3)) == [Token.int_(-3)]
    assert _tokens(FloatNode("Float", 1.5)) == [Token.float64(1.5)]
    assert _tokens(StringNode("String", "hi")) == [Token.string("hi")]


def test_map_and_list_framing() -> None:
    node = MapNode(
        "M",
        (
            (_key("a"), IntNode("Int", 1)),
            (_key("b"), ListNode("L", (IntNode("Int", 2), NULL))),
        ),
    )
    assert _tokens(node) == [
        Token.map_open(2),
        Token.string("a"),
        Token.int_(1),
        Token.string("b"),
        Token.arr_open(2),
        Token.int_(2),
        Token.null(),
        Token.arr_close(),
        Token.map_close(),
    ]


def test_struct_skips_absent_fields() -> None:
    node = StructNode(
        "S",
        (
            ("A", Maybe.of(IntNode("Int", 1))),
            ("B", Maybe.null()),
            ("C", Maybe.absent()),
        ),
    )
    assert _tokens(node) == [
        Token.map_open(2),
        Token.string("A"),
        Token.int_(1),
        Token.string("B"),
        Token.null(),
        Token.map_close(),
    ]


def test_big_int_renders_decimal() -> None:
    node = BytesNode("BigInt", (12345).to_bytes(2, "big"), Tag.BIG_INT)
    assert _tokens(node) == [Token.string("12345")]
    assert _tokens(BytesNode("BigInt", b"", Tag.BIG_INT)) == [Token.string("0")]


def test_address_renders_with_network_prefix() -> None:
    node = BytesNode("Address", b"\x00\xd2\x09", Tag.ADDRESS)
    assert _tokens(node) == [Token.string("f01234")]
    assert _tokens(node, settings=Settings(network="t")) == [Token.string("t01234")]


def test_untagged_bytes_render_base64() -> None:
    assert _tokens(BytesNode("Bytes", b"\x00\x01\x02")) == [Token.string("AAEC")]


@pytest.mark.parametrize("wrap", [False, True])
def test_bitfield_renders_cbor_wrapped_canonical_hex(wrap: bool) -> None:
    raw = BitField.from_set([0, 2, 5]).to_bytes()
    node = BytesNode("BitField", cbor2.dumps(raw) if wrap else raw, Tag.BITFIELD)

    tokens = _tokens(node)

    assert [t.kind for t in tokens] == [
        TokenKind.MAP_OPEN,
        TokenKind.STRING,
        TokenKind.STRING,
        TokenKind.STRING,
        TokenKind.STRING,
        TokenKind.MAP_CLOSE,
    ]
    assert tokens[0].length == 2
    assert [t.value for t in tokens[1:5]] == ["_type", "bitfield", "bytes", "42bc12"]
    decoded = BitField.from_cbor(bytes.fromhex(tokens[4].value))
    assert list(decoded) == [0, 2, 5]
    assert decoded.to_cbor().hex() == tokens[4].value


def test_invalid_bitfield_is_a_marshal_error() -> None:
    with pytest.raises(MarshalError):
        _tokens(BytesNode("BitField", b"\x01", Tag.BITFIELD))


def test_tagged_map_keys_are_rerendered_and_extend_the_path() -> None:
    cid_key = compute_cid(b"k")
    node = MapNode(
        "M",
        (
            (StringNode.from_raw("RawAddress", b"\x00\x05", Tag.RAW_ADDRESS), LinkNode("Link", TARGET)),
            (StringNode.from_raw("CidString", bytes(cid_key), Tag.CID_STRING), LinkNode("Link", TARGET)),
        ),
    )
    seen: list[tuple] = []

    def loader(cid: CID, path: tuple) -> None:
        seen.append(path)
        return None

    tokens = _tokens(node, loader=loader)

    assert tokens[1] == Token.string("f05")
    assert tokens[6] == Token.string(str(cid_key))
    assert seen == [("f05",), (str(cid_key),)]


def test_list_indices_extend_the_path() -> None:
    node = ListNode("L", (LinkNode("Link", TARGET), LinkNode("Link", TARGET)))
    seen: list[tuple] = []
    DagMarshaler(lambda c, p: seen.append(p)).marshal_recursive(node, ListSink(), ("Due",))
    assert seen == [("Due", 0), ("Due", 1)]


def test_unresolved_link_is_exactly_four_tokens() -> None:
    expected = [
        Token.map_open(1),
        Token.string("/"),
        Token.string(str(TARGET)),
        Token.map_close(),
    ]
    link = LinkNode("Link", TARGET)
    assert _tokens(link) == expected
    assert _tokens(link, loader=lambda c, p: None) == expected


def test_resolved_link_is_inlined_token_for_token() -> None:
    inner = MapNode("M", ((_key("x"), IntNode("Int", 1)),))
    deeper = ListNode("L", (LinkNode("Link", TARGET),))
    other = compute_cid(b"other")
    nodes = {TARGET: inner, other: deeper}

    def loader(cid: CID, path: tuple):
        return nodes.get(cid)

    assert _tokens(LinkNode("Link", TARGET), loader=loader) == _tokens(inner)
    # Inlining applies at any depth
    assert _tokens(LinkNode("Link", other), loader=loader) == (
        [Token.arr_open(1)] + _tokens(inner) + [Token.arr_close()]
    )


def test_non_cid_link_is_rejected() -> None:
    with pytest.raises(MarshalError, match="CID-typed links"):
        _tokens(LinkNode("Link", "not-a-cid"))


def test_absent_node_is_rejected() -> None:
    with pytest.raises(MarshalError):
        marshal(ABSENT, ListSink())


def test_sink_errors_stop_the_walk() -> None:
    class Failing:
        def __init__(self) -> None:
            self.count = 0

        def step(self, token: Token) -> None:
            self.count += 1
            if self.count == 2:
                raise OSError("disk full")

    sink = Failing()
    node = ListNode("L", tuple(IntNode("Int", i) for i in range(5)))
    with pytest.raises(OSError):
        marshal(node, sink)
    assert sink.count == 2


def test_deep_nesting_does_not_recurse() -> None:
    node = IntNode("Int", 0)
    for _ in range(5000):
        node = ListNode("L", (node,))
    tokens = _tokens(node)
    assert len(tokens) == 2 * 5000 + 1
