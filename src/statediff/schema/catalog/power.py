"""Storage power actor types.

Schema:
- PowerV0State: network power totals, smoothed QA power estimate, the cron event
  queue (multimap of epoch → AMT of events) and the per-miner claims HAMT.
- PowerV0CronEvent [MinerAddr, CallbackPayload]
- PowerV0Claim [RawBytePower, QualityAdjPower]

Notes:
- Map__PowerV0CronEvent is keyed by epoch; each value is a Map__PowerV0CronEventBucket
  keyed by the event's position in that epoch's AMT.
"""

from __future__ import annotations

from ..types import MapType, TypeSystem
from .common import field, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(
        struct(
            "PowerV0State",
            field("TotalRawBytePower", "StoragePower"),
            field("TotalBytesCommitted", "StoragePower"),
            field("TotalQualityAdjPower", "StoragePower"),
            field("TotalQABytesCommitted", "StoragePower"),
            field("TotalPledgeCollateral", "TokenAmount"),
            field("ThisEpochRawBytePower", "StoragePower"),
            field("ThisEpochQualityAdjPower", "StoragePower"),
            field("ThisEpochPledgeCollateral", "TokenAmount"),
            field("ThisEpochQAPowerSmoothed", "FilterEstimate", nullable=True),
            field("MinerCount", "Int"),
            field("MinerAboveMinPowerCount", "Int"),
            field("CronEventQueue", "Link"),
            field("FirstCronEpoch", "ChainEpoch"),
            field("LastProcessedCronEpoch", "ChainEpoch"),
            field("Claims", "Link"),
            field("ProofValidationBatch", "Link", nullable=True),
        )
    )
    ts.accumulate(
        struct(
            "PowerV0CronEvent",
            field("MinerAddr", "Address"),
            field("CallbackPayload", "Bytes"),
        )
    )
    ts.accumulate(
        struct(
            "PowerV0Claim",
            field("RawBytePower", "StoragePower"),
            field("QualityAdjPower", "StoragePower"),
        )
    )
    ts.accumulate(map_of("Map__PowerV0CronEventBucket", "PowerV0CronEvent"))
    ts.accumulate(MapType(name="Map__PowerV0CronEvent", value="Map__PowerV0CronEventBucket"))
    ts.accumulate(map_of("Map__PowerV0Claim", "PowerV0Claim", key="RawAddress"))
