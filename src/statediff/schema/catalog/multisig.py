"""Multisig actor types.

Schema:
- MultisigV0State [Signers, NumApprovalsThreshold, NextTxnID, InitialBalance,
  StartEpoch, UnlockDuration, PendingTxns]; PendingTxns is a HAMT keyed by txn id.
- MultisigV0Transaction [To, Value, Method, Params, Approved]
"""

from __future__ import annotations

from ..kinds import Kind
from ..types import ScalarType, TypeSystem
from .common import field, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(ScalarType(name="MultisigV0TxnID", scalar=Kind.INT))
    ts.accumulate(
        struct(
            "MultisigV0State",
            field("Signers", "List__Address"),
            field("NumApprovalsThreshold", "Int"),
            field("NextTxnID", "MultisigV0TxnID"),
            field("InitialBalance", "TokenAmount"),
            field("StartEpoch", "ChainEpoch"),
            field("UnlockDuration", "ChainEpoch"),
            field("PendingTxns", "Link"),
        )
    )
    ts.accumulate(
        struct(
            "MultisigV0Transaction",
            field("To", "Address"),
            field("Value", "TokenAmount"),
            field("Method", "MethodNum"),
            field("Params", "Bytes"),
            field("Approved", "List__Address"),
        )
    )
    ts.accumulate(map_of("Map__MultisigV0Transaction", "MultisigV0Transaction"))
