"""
Type path resolution.

A type path is any string naming where a value sits in chain state, e.g.
``"storageMinerActor/Deadlines/Due/3/Partitions"`` or ``"tipset.ParentStateRoot"``.
resolve_type() reduces it to the TypeKey the registry is keyed by:

1. ``/`` becomes ``.``;
2. bracketed numeric indices (``[12]``) are removed;
3. numeric segments (``.3.``) collapse to ``.``;
4. the result is substituted through ALIASES.

Steps 1-3 repeat until nothing changes, so adjacent numeric segments collapse too and
resolve_type(resolve_type(p)) == resolve_type(p) for every p.

Notes:
    - Resolution is total: an unknown path resolves to itself and only fails later, at
      registry lookup.
    - No alias target is an alias source and none contains a numeric segment.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from multiformats import CID

from ..core.typing import TypeKey

__all__ = [
    "LotusType",
    "ALIASES",
    "ACTOR_CODES",
    "resolve_type",
    "actor_type_for_code",
]

logger = logging.getLogger(__name__)


class LotusType(str, Enum):
    """Known type keys."""

    TIPSET = "tipset"
    STATE_ROOT = "stateRoot"
    SYSTEM_ACTOR = "systemActor"
    ACCOUNT_ACTOR = "accountActor"
    CRON_ACTOR = "cronActor"
    INIT_ACTOR = "initActor"
    INIT_ACTOR_ADDRESSES = "initActorAddresses"
    MARKET_ACTOR = "storageMarketActor"
    MARKET_PROPOSALS = "storageMarketActor.Proposals"
    MARKET_STATES = "storageMarketActor.States"
    MARKET_PENDING_PROPOSALS = "storageMarketActor.PendingProposals"
    MARKET_ESCROW_TABLE = "storageMarketActor.EscrowTable"
    MARKET_LOCKED_TABLE = "storageMarketActor.LockedTable"
    MARKET_DEAL_OPS_BY_EPOCH = "storageMarketActor.DealOpsByEpoch"
    MULTISIG_ACTOR = "multisigActor"
    MULTISIG_PENDING_TXNS = "multisigActor.PendingTxns"
    MINER_ACTOR = "storageMinerActor"
    MINER_INFO = "storageMinerActor.Info"
    MINER_VESTING_FUNDS = "storageMinerActor.VestingFunds"
    MINER_PRECOMMITTED_SECTORS = "storageMinerActor.PreCommittedSectors"
    MINER_PRECOMMITTED_SECTORS_EXPIRY = "storageMinerActor.PreCommittedSectorsExpiry"
    MINER_ALLOCATED_SECTORS = "storageMinerActor.AllocatedSectors"
    MINER_SECTORS = "storageMinerActor.Sectors"
    MINER_DEADLINES = "storageMinerActor.Deadlines"
    MINER_DEADLINE = "storageMinerActor.Deadlines.Due"
    MINER_DEADLINE_PARTITIONS = "storageMinerActor.Deadlines.Due.Partitions"
    MINER_PARTITION_EXPIRY = "storageMinerActor.Deadlines.Due.Partitions.ExpirationsEpochs"
    MINER_PARTITION_EARLY_TERMINATED = (
        "storageMinerActor.Deadlines.Due.Partitions.EarlyTerminated"
    )
    MINER_DEADLINE_EXPIRY = "storageMinerActor.Deadlines.Due.ExpirationsEpochs"
    POWER_ACTOR = "storagePowerActor"
    POWER_CRON_EVENT_QUEUE = "storagePowerCronEventQueue"
    POWER_CLAIMS = "storagePowerClaims"
    REWARD_ACTOR = "rewardActor"
    VERIFREG_ACTOR = "verifiedRegistryActor"
    VERIFREG_VERIFIERS = "verifiedRegistryActor.Verifiers"
    VERIFREG_VERIFIED_CLIENTS = "verifiedRegistryActor.VerifiedClients"
    PAYCH_ACTOR = "paymentChannelActor"
    PAYCH_LANE_STATES = "paymentChannelActor.LaneStates"


# Paths that reach a type through a different route than its canonical key.
ALIASES: dict[str, LotusType] = {
    "tipset.ParentStateRoot": LotusType.STATE_ROOT,
    "initActor.AddressMap": LotusType.INIT_ACTOR_ADDRESSES,
    "storagePowerActor.CronEventQueue": LotusType.POWER_CRON_EVENT_QUEUE,
    "storagePowerActor.Claims": LotusType.POWER_CLAIMS,
    "storageMinerActor.Deadlines.Due.ExpirationEpochs": LotusType.MINER_DEADLINE_EXPIRY,
    "storageMinerActor.Deadlines.Due.Partitions.ExpirationEpochs": (
        LotusType.MINER_PARTITION_EXPIRY
    ),
}

# v0 builtin actor code CIDs (identity multihash of "fil/1/<name>").
ACTOR_CODES: dict[str, LotusType] = {
    "bafkqaddgnfwc6mjpon4xg5dfnu": LotusType.SYSTEM_ACTOR,
    "bafkqactgnfwc6mjpnfxgs5a": LotusType.INIT_ACTOR,
    "bafkqaddgnfwc6mjpojsxoylsmq": LotusType.REWARD_ACTOR,
    "bafkqactgnfwc6mjpmnzg63q": LotusType.CRON_ACTOR,
    "bafkqaetgnfwc6mjpon2g64tbm5sxa33xmvza": LotusType.POWER_ACTOR,
    "bafkqae3gnfwc6mjpon2g64tbm5sw2ylsnnsxi": LotusType.MARKET_ACTOR,
    "bafkqaftgnfwc6mjpozsxe2lgnfswi4tfm5uxg5dspe": LotusType.VERIFREG_ACTOR,
    "bafkqadlgnfwc6mjpmfrwg33vnz2a": LotusType.ACCOUNT_ACTOR,
    "bafkqadtgnfwc6mjpnv2wy5djonuwo": LotusType.MULTISIG_ACTOR,
    "bafkqafdgnfwc6mjpobqxs3lfnz2gg2dbnzxgk3a": LotusType.PAYCH_ACTOR,
    "bafkqaetgnfwc6mjpon2g64tbm5sw22lomvza": LotusType.MINER_ACTOR,
}

_INDEX_RE = re.compile(r"\[\d+\]")
_SEGMENT_RE = re.compile(r"\.\d+\.")


def _normalize(path: str) -> str:
    path = path.replace("/", ".")
    path = _INDEX_RE.sub("", path)
    return _SEGMENT_RE.sub(".", path)


def resolve_type(path: str) -> TypeKey:
    """
    Reduce a type path to its TypeKey.

    Args:
        path (str): Any string; typically a dotted or slashed state path.

    Returns:
        TypeKey: Canonical key. Never raises.

    Examples:
        >>> resolve_type("storageMinerActor/Deadlines/Due/3/Partitions")
        'storageMinerActor.Deadlines.Due.Partitions'
        >>> resolve_type("tipset.ParentStateRoot")
        'stateRoot'
    """
    current = path
    while True:
        nxt = _normalize(current)
        if nxt == current:
            break
        current = nxt
    alias = ALIASES.get(current)
    if alias is not None:
        current = alias.value
    logger.debug("resolved type path %r to %r", path, current)
    return TypeKey(current)


def actor_type_for_code(code: str | CID) -> LotusType | None:
    """
    Map a v0 builtin actor code CID to the TypeKey of its state.

    Args:
        code (str | CID): Actor code, as a CID or its base32 string.

    Returns:
        LotusType | None: The actor state key, or None for an unknown code.
    """
    return ACTOR_CODES.get(str(code))
