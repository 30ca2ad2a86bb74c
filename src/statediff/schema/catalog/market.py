"""Storage market actor types.

Schema:
- MarketV0State: roots of Proposals (AMT), States (AMT), PendingProposals (HAMT keyed
  by proposal CID), EscrowTable / LockedTable (balance HAMTs), DealOpsByEpoch (set
  multimap) plus counters and collateral totals.
- MarketV0DealProposal, MarketV0DealState: element types of the deal tables.

Notes:
- Map__MarketV0PendingProposal keys are binary CIDs (CidString).
"""

from __future__ import annotations

from ..types import TypeSystem
from .common import field, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(
        struct(
            "MarketV0State",
            field("Proposals", "Link"),
            field("States", "Link"),
            field("PendingProposals", "Link"),
            field("EscrowTable", "Link"),
            field("LockedTable", "Link"),
            field("NextID", "DealID"),
            field("DealOpsByEpoch", "Link"),
            field("LastCron", "ChainEpoch"),
            field("TotalClientLockedCollateral", "TokenAmount"),
            field("TotalProviderLockedCollateral", "TokenAmount"),
            field("TotalClientStorageFee", "TokenAmount"),
        )
    )
    ts.accumulate(
        struct(
            "MarketV0DealProposal",
            field("PieceCID", "Link"),
            field("PieceSize", "Int"),
            field("VerifiedDeal", "Bool"),
            field("Client", "Address"),
            field("Provider", "Address"),
            field("Label", "String"),
            field("StartEpoch", "ChainEpoch"),
            field("EndEpoch", "ChainEpoch"),
            field("StoragePricePerEpoch", "TokenAmount"),
            field("ProviderCollateral", "TokenAmount"),
            field("ClientCollateral", "TokenAmount"),
        )
    )
    ts.accumulate(
        struct(
            "MarketV0DealState",
            field("SectorStartEpoch", "ChainEpoch"),
            field("LastUpdatedEpoch", "ChainEpoch"),
            field("SlashEpoch", "ChainEpoch"),
        )
    )
    ts.accumulate(map_of("Map__MarketV0DealProposal", "MarketV0DealProposal"))
    ts.accumulate(
        map_of("Map__MarketV0PendingProposal", "MarketV0DealProposal", key="CidString")
    )
    ts.accumulate(map_of("Map__MarketV0DealState", "MarketV0DealState"))
    ts.accumulate(map_of("Map__List__DealID", "List__DealID"))
