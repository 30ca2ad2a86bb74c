from __future__ import annotations

import io
import json

import pytest

from statediff.codec.json import JsonSink, render_json
from statediff.codec.tokens import Token
from statediff.config import Settings
from statediff.core.errors import MarshalError
from statediff.schema.kinds import Tag
from statediff.schema.nodes import (
    NULL,
    BoolNode,
    BytesNode,
    FloatNode,
    IntNode,
    LinkNode,
    ListNode,
    MapNode,
    StringNode,
)
from statediff.store.blockstore import compute_cid


def _key(text: str) -> StringNode:
    return StringNode("String", text)


def test_render_matches_json_dumps_layout() -> None:
    node = MapNode(
        "M",
        (
            (_key("a"), IntNode("Int", 1)),
            (_key("b"), ListNode("L", (BoolNode("Bool", True), NULL, FloatNode("Float", 0.5)))),
            (_key("c"), MapNode("E")),
            (_key("d"), ListNode("E")),
            (_key("q\"uote"), StringNode("String", "é\n")),
        ),
    )
    expected = {"a": 1, "b": [True, None, 0.5], "c": {}, "d": [], "q\"uote": "é\n"}

    text = render_json(node)

    assert text == json.dumps(expected, indent=2)
    assert json.loads(text) == expected


def test_render_uses_configured_indent_and_network() -> None:
    node = MapNode("M", ((_key("to"), BytesNode("Address", b"\x00\x01", Tag.ADDRESS)),))
    text = render_json(node, settings=Settings(network="t", json_indent=4))
    assert text == json.dumps({"to": "t01"}, indent=4)


def test_unresolved_link_renders_as_dag_json_link() -> None:
    cid = compute_cid(b"x")
    assert json.loads(render_json(LinkNode("Link", cid))) == {"/": str(cid)}


def test_scalar_top_level_value() -> None:
    assert render_json(IntNode("Int", 7)) == "7"


@pytest.mark.parametrize(
    "tokens",
    [
        [Token.map_close()],
        [Token.map_open(1), Token.int_(1)],
        [Token.map_open(1), Token.string("k"), Token.map_close()],
        [Token.arr_open(2), Token.int_(1), Token.arr_close()],
        [Token.arr_open(0), Token.map_close()],
        [Token.int_(1), Token.int_(2)],
    ],
)
def test_malformed_streams_are_rejected(tokens: list[Token]) -> None:
    sink = JsonSink(io.StringIO())
    with pytest.raises(MarshalError):
        for t in tokens:
            sink.step(t)


def test_close_requires_a_complete_value() -> None:
    sink = JsonSink(io.StringIO())
    sink.step(Token.arr_open(1))
    with pytest.raises(MarshalError):
        sink.close()
