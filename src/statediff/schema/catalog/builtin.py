"""Small builtin actors: account, cron, init, reward, verified registry, payment channel.

Schema (all tuple-represented):
- AccountV0State    [Address]
- CronV0State       [Entries]
- InitV0State       [AddressMap, NextID, NetworkName]; AddressMap is Map__ActorID
- RewardV0State     [CumsumBaseline, CumsumRealized, EffectiveNetworkTime, ...]
- VerifregV0State   [RootKey, Verifiers, VerifiedClients]; both tables are Map__DataCap
- PaychV0State      [From, To, ToSend, SettlingAt, MinSettleHeight, LaneStates]
"""

from __future__ import annotations

from ..types import TypeSystem
from .common import field, list_of, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(struct("AccountV0State", field("Address", "Address")))

    ts.accumulate(
        struct(
            "CronV0Entry",
            field("Receiver", "Address"),
            field("MethodNum", "MethodNum"),
        )
    )
    ts.accumulate(list_of("List__CronV0Entry", "CronV0Entry"))
    ts.accumulate(struct("CronV0State", field("Entries", "List__CronV0Entry")))

    ts.accumulate(
        struct(
            "InitV0State",
            field("AddressMap", "Link"),
            field("NextID", "ActorID"),
            field("NetworkName", "String"),
        )
    )
    ts.accumulate(map_of("Map__ActorID", "ActorID", key="RawAddress"))

    ts.accumulate(
        struct(
            "RewardV0State",
            field("CumsumBaseline", "StoragePower"),
            field("CumsumRealized", "StoragePower"),
            field("EffectiveNetworkTime", "ChainEpoch"),
            field("EffectiveBaselinePower", "StoragePower"),
            field("ThisEpochReward", "TokenAmount"),
            field("ThisEpochRewardSmoothed", "FilterEstimate", nullable=True),
            field("ThisEpochBaselinePower", "StoragePower"),
            field("Epoch", "ChainEpoch"),
            field("TotalMined", "TokenAmount"),
        )
    )

    ts.accumulate(
        struct(
            "VerifregV0State",
            field("RootKey", "Address"),
            field("Verifiers", "Link"),
            field("VerifiedClients", "Link"),
        )
    )

    ts.accumulate(
        struct(
            "PaychV0State",
            field("From", "Address"),
            field("To", "Address"),
            field("ToSend", "TokenAmount"),
            field("SettlingAt", "ChainEpoch"),
            field("MinSettleHeight", "ChainEpoch"),
            field("LaneStates", "Link"),
        )
    )
    ts.accumulate(
        struct(
            "PaychV0LaneState",
            field("Redeemed", "TokenAmount"),
            field("Nonce", "Int"),
        )
    )
    ts.accumulate(map_of("Map__PaychV0LaneState", "PaychV0LaneState"))
