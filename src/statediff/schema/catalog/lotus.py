"""Chain-level types: block headers and the state tree.

Schema:
- LotusBlockHeader: the tipset entry point; ParentStateRoot links to the state tree.
- LotusActors: one state tree entry: [Code, Head, Nonce, Balance].
- Map__LotusActors: the state tree HAMT, keyed by binary address.
"""

from __future__ import annotations

from ..types import TypeSystem
from .common import field, list_of, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(struct("LotusTicket", field("VRFProof", "Bytes")))
    ts.accumulate(
        struct(
            "LotusElectionProof",
            field("WinCount", "Int"),
            field("VRFProof", "Bytes"),
        )
    )
    ts.accumulate(struct("LotusBeaconEntry", field("Round", "Int"), field("Data", "Bytes")))
    ts.accumulate(list_of("List__LotusBeaconEntry", "LotusBeaconEntry"))
    ts.accumulate(
        struct(
            "PoStProof",
            field("PoStProof", "Int"),
            field("ProofBytes", "Bytes"),
        )
    )
    ts.accumulate(list_of("List__PoStProof", "PoStProof"))
    ts.accumulate(
        struct(
            "LotusBlockHeader",
            field("Miner", "Address"),
            field("Ticket", "LotusTicket", nullable=True),
            field("ElectionProof", "LotusElectionProof", nullable=True),
            field("BeaconEntries", "List__LotusBeaconEntry"),
            field("WinPoStProof", "List__PoStProof"),
            field("Parents", "List__Link"),
            field("ParentWeight", "BigInt"),
            field("Height", "ChainEpoch"),
            field("ParentStateRoot", "Link"),
            field("ParentMessageReceipts", "Link"),
            field("Messages", "Link"),
            field("BLSAggregate", "Signature", nullable=True),
            field("Timestamp", "Int"),
            field("BlockSig", "Signature", nullable=True),
            field("ForkSignaling", "Int"),
        )
    )
    ts.accumulate(
        struct(
            "LotusActors",
            field("Code", "Link"),
            field("Head", "Link"),
            field("Nonce", "Int"),
            field("Balance", "BigInt"),
        )
    )
    ts.accumulate(map_of("Map__LotusActors", "LotusActors", key="RawAddress"))
