from __future__ import annotations

import pytest

from statediff.decode.resolver import (
    ACTOR_CODES,
    ALIASES,
    LotusType,
    actor_type_for_code,
    resolve_type,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("storageMinerActor", "storageMinerActor"),
        ("storageMinerActor/Info", "storageMinerActor.Info"),
        ("storageMinerActor.Deadlines.Due[3]", "storageMinerActor.Deadlines.Due"),
        (
            "storageMinerActor/Deadlines/Due/3/Partitions",
            "storageMinerActor.Deadlines.Due.Partitions",
        ),
        (
            "storageMinerActor.Deadlines.Due[12].Partitions.4.ExpirationEpochs",
            "storageMinerActor.Deadlines.Due.Partitions.ExpirationsEpochs",
        ),
        ("tipset.ParentStateRoot", "stateRoot"),
        ("tipset/ParentStateRoot", "stateRoot"),
        ("initActor.AddressMap", "initActorAddresses"),
        ("storagePowerActor.Claims", "storagePowerClaims"),
        ("a.1.2.b", "a.b"),
        ("", ""),
    ],
)
def test_resolve_type(path: str, expected: str) -> None:
    assert resolve_type(path) == expected


@pytest.mark.parametrize(
    "path",
    [
        "a.1.2.3.b",
        "x[1][2].y",
        "a.[0]1.b",
        "storageMinerActor.Deadlines.Due.ExpirationEpochs",
        "weird/./9/.x",
        "[[7]1]",
    ],
)
def test_resolution_is_idempotent(path: str) -> None:
    once = resolve_type(path)
    assert resolve_type(once) == once


def test_alias_targets_are_fixed_points() -> None:
    for target in ALIASES.values():
        assert target.value not in ALIASES
        assert resolve_type(target.value) == target.value


def test_actor_codes_map_to_state_keys() -> None:
    assert actor_type_for_code("bafkqadlgnfwc6mjpmfrwg33vnz2a") is LotusType.ACCOUNT_ACTOR
    assert actor_type_for_code("bafkqaetgnfwc6mjpon2g64tbm5sw22lomvza") is LotusType.MINER_ACTOR
    assert actor_type_for_code("bafkunknown") is None
    assert len(ACTOR_CODES) == 11
