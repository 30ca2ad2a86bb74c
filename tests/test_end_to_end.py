from __future__ import annotations

import json

from statediff.codec.json import render_json
from statediff.codec.marshal import marshal
from statediff.codec.tokens import ListSink, Token, TokenKind
from statediff.config import Settings
from statediff.decode.transform import TransformLoader, transform
from statediff.store.blockstore import MemoryBlockstore


def test_payment_channel_renders_with_inlined_lanes(store: MemoryBlockstore, amt) -> None:
    # Arrange
    lanes = amt(store, {0: [b"\x05", 1], 9: [b"\x01\x00", 2]})
    root = store.put_object([b"\x00\x01", b"\x00\x02", b"\x30\x39", 0, 100, lanes])
    settings = Settings(network="t")

    # Act
    node = transform(root, store, "paymentChannelActor", settings)
    text = render_json(node, TransformLoader(store, "paymentChannelActor", settings), settings)

    # Assert
    assert json.loads(text) == {
        "From": "t01",
        "To": "t02",
        "ToSend": "12345",
        "SettlingAt": 0,
        "MinSettleHeight": 100,
        "LaneStates": {
            "0": {"Redeemed": "5", "Nonce": 1},
            "9": {"Redeemed": "256", "Nonce": 2},
        },
    }


def test_unregistered_links_stay_links(store: MemoryBlockstore, hamt, id_address) -> None:
    code = store.put_object(["not decoded"])
    head = store.put_object([b"\x00\x07"])
    root = hamt(store, [(id_address(7), [code, head, 3, b""])])

    node = transform(root, store, "stateRoot")
    text = render_json(node, TransformLoader(store, "stateRoot"))

    doc = json.loads(text)
    assert doc == {
        "f07": {
            "Code": {"/": str(code)},
            "Head": {"/": str(head)},
            "Nonce": 3,
            "Balance": "0",
        }
    }


def test_hamt_map_marshals_uint_keys_in_native_order(store: MemoryBlockstore, hamt) -> None:
    # Arrange
    txn = [b"\x00\x01", b"\x00", 0, b"", [b"\x00\x02", b"\x00\x03"]]
    root = hamt(store, [(b"\x01\x00", txn), (b"\x07", txn), (b"\xff\xff", txn)])
    node = transform(root, store, "multisigActor.PendingTxns")
    sink = ListSink()

    # Act
    marshal(node, sink)
    text = render_json(node)

    # Assert
    assert sink.tokens[0] == Token.map_open(3)
    depth = 0
    keys: list[str] = []
    expect_key = True
    for tok in sink.tokens[1:-1]:
        if depth == 0 and expect_key:
            keys.append(tok.value)
            expect_key = False
            continue
        if tok.kind in (TokenKind.MAP_OPEN, TokenKind.ARR_OPEN):
            depth += 1
        elif tok.kind in (TokenKind.MAP_CLOSE, TokenKind.ARR_CLOSE):
            depth -= 1
        if depth == 0:
            expect_key = True
    assert keys == ["256", "7", "65535"]
    doc = json.loads(text)
    assert list(doc) == ["256", "7", "65535"]
    assert doc["7"] == {
        "To": "f01",
        "Value": "0",
        "Method": 0,
        "Params": "",
        "Approved": ["f02", "f03"],
    }


def test_cron_multimap_marshals_two_levels(store: MemoryBlockstore, hamt, amt) -> None:
    # Arrange
    events = {i: [b"\x00" + bytes([i + 1]), bytes([i])] for i in range(3)}
    root = hamt(store, [(b"\x05", amt(store, events)), (b"\x01\x00", amt(store, {4: events[0]}))])
    node = transform(root, store, "storagePowerActor.CronEventQueue")

    # Act
    doc = json.loads(render_json(node))

    # Assert
    assert list(doc) == ["5", "256"]
    assert list(doc["5"]) == ["0", "1", "2"]
    assert doc["5"]["2"] == {"MinerAddr": "f03", "CallbackPayload": "Ag=="}
    assert doc["256"] == {"4": {"MinerAddr": "f01", "CallbackPayload": "AA=="}}
