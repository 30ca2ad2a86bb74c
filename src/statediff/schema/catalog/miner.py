"""Storage miner actor types.

Schema:
- MinerV0State: funds, links to Info, VestingFunds, PreCommittedSectors (HAMT keyed by
  sector number), PreCommittedSectorsExpiry (AMT of bitfields), AllocatedSectors
  (bitfield block), Sectors (AMT), Deadlines, and the EarlyTerminations bitfield.
- MinerV0Info, MinerV0VestingFunds, MinerV0Deadlines, MinerV0Deadline: flat blocks.
- MinerV0Partition, MinerV0ExpirationSet: AMT elements under a deadline.
- MinerV0SectorPreCommitOnChainInfo, MinerV0SectorOnChainInfo: sector records.

Notes:
- Deadline and partition expiration queues are AMTs keyed by epoch.
"""

from __future__ import annotations

from ..types import TypeSystem
from .common import field, list_of, map_of, struct


def accumulate(ts: TypeSystem) -> None:
    ts.accumulate(
        struct(
            "MinerV0State",
            field("Info", "Link"),
            field("PreCommitDeposits", "TokenAmount"),
            field("LockedFunds", "TokenAmount"),
            field("VestingFunds", "Link"),
            field("InitialPledgeRequirement", "TokenAmount"),
            field("PreCommittedSectors", "Link"),
            field("PreCommittedSectorsExpiry", "Link"),
            field("AllocatedSectors", "Link"),
            field("Sectors", "Link"),
            field("ProvingPeriodStart", "ChainEpoch"),
            field("CurrentDeadline", "Int"),
            field("Deadlines", "Link"),
            field("EarlyTerminations", "BitField"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0WorkerKeyChange",
            field("NewWorker", "Address"),
            field("EffectiveAt", "ChainEpoch"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0Info",
            field("Owner", "Address"),
            field("Worker", "Address"),
            field("ControlAddresses", "List__Address"),
            field("PendingWorkerKey", "MinerV0WorkerKeyChange", nullable=True),
            field("PeerId", "PeerID"),
            field("Multiaddrs", "List__Bytes"),
            field("SealProofType", "Int"),
            field("SectorSize", "Int"),
            field("WindowPoStPartitionSectors", "Int"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0VestingFund",
            field("Epoch", "ChainEpoch"),
            field("Amount", "TokenAmount"),
        )
    )
    ts.accumulate(list_of("List__MinerV0VestingFund", "MinerV0VestingFund"))
    ts.accumulate(struct("MinerV0VestingFunds", field("Funds", "List__MinerV0VestingFund")))

    ts.accumulate(
        struct(
            "MinerV0SectorPreCommitInfo",
            field("SealProof", "Int"),
            field("SectorNumber", "SectorNumber"),
            field("SealedCID", "Link"),
            field("SealRandEpoch", "ChainEpoch"),
            field("DealIDs", "List__DealID"),
            field("Expiration", "ChainEpoch"),
            field("ReplaceCapacity", "Bool"),
            field("ReplaceSectorDeadline", "Int"),
            field("ReplaceSectorPartition", "Int"),
            field("ReplaceSectorNumber", "SectorNumber"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0SectorPreCommitOnChainInfo",
            field("Info", "MinerV0SectorPreCommitInfo"),
            field("PreCommitDeposit", "TokenAmount"),
            field("PreCommitEpoch", "ChainEpoch"),
            field("DealWeight", "DealWeight"),
            field("VerifiedDealWeight", "DealWeight"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0SectorOnChainInfo",
            field("SectorNumber", "SectorNumber"),
            field("SealProof", "Int"),
            field("SealedCID", "Link"),
            field("DealIDs", "List__DealID"),
            field("Activation", "ChainEpoch"),
            field("Expiration", "ChainEpoch"),
            field("DealWeight", "DealWeight"),
            field("VerifiedDealWeight", "DealWeight"),
            field("InitialPledge", "TokenAmount"),
            field("ExpectedDayReward", "TokenAmount"),
            field("ExpectedStoragePledge", "TokenAmount"),
        )
    )

    ts.accumulate(
        struct(
            "MinerV0PowerPair",
            field("Raw", "StoragePower"),
            field("QA", "StoragePower"),
        )
    )
    ts.accumulate(struct("MinerV0Deadlines", field("Due", "List__Link")))
    ts.accumulate(
        struct(
            "MinerV0Deadline",
            field("Partitions", "Link"),
            field("ExpirationsEpochs", "Link"),
            field("PostSubmissions", "BitField"),
            field("EarlyTerminations", "BitField"),
            field("LiveSectors", "Int"),
            field("TotalSectors", "Int"),
            field("FaultyPower", "MinerV0PowerPair"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0Partition",
            field("Sectors", "BitField"),
            field("Faults", "BitField"),
            field("Recoveries", "BitField"),
            field("Terminated", "BitField"),
            field("ExpirationsEpochs", "Link"),
            field("EarlyTerminated", "Link"),
            field("LivePower", "MinerV0PowerPair"),
            field("FaultyPower", "MinerV0PowerPair"),
            field("RecoveringPower", "MinerV0PowerPair"),
        )
    )
    ts.accumulate(
        struct(
            "MinerV0ExpirationSet",
            field("OnTimeSectors", "BitField"),
            field("EarlySectors", "BitField"),
            field("OnTimePledge", "TokenAmount"),
            field("ActivePower", "MinerV0PowerPair"),
            field("FaultyPower", "MinerV0PowerPair"),
        )
    )

    ts.accumulate(
        map_of("Map__SectorPreCommitOnChainInfo", "MinerV0SectorPreCommitOnChainInfo")
    )
    ts.accumulate(map_of("Map__SectorOnChainInfo", "MinerV0SectorOnChainInfo"))
    ts.accumulate(map_of("Map__MinerV0Partition", "MinerV0Partition"))
    ts.accumulate(map_of("Map__MinerV0ExpirationSet", "MinerV0ExpirationSet"))
