from __future__ import annotations

import pytest
from pydantic import ValidationError

from statediff.core.errors import ResolutionError
from statediff.schema.catalog import TYPE_SYSTEM, list_types, prototype
from statediff.schema.kinds import Kind, Tag
from statediff.schema.types import (
    ListType,
    MapType,
    ScalarType,
    StructField,
    StructType,
    TypeSystem,
)


def test_scalar_tag_must_fit_kind() -> None:
    ScalarType(name="Address", scalar=Kind.BYTES, tag=Tag.ADDRESS)
    with pytest.raises(ValidationError):
        ScalarType(name="Bad", scalar=Kind.STRING, tag=Tag.BIG_INT)
    with pytest.raises(ValidationError):
        ScalarType(name="Bad", scalar=Kind.BYTES, tag=Tag.RAW_ADDRESS)
    with pytest.raises(ValidationError):
        ScalarType(name="Bad", scalar=Kind.MAP)


def test_struct_field_names_must_be_unique() -> None:
    with pytest.raises(ValidationError):
        StructType(
            name="Dup",
            fields=(StructField(name="A", type="Int"), StructField(name="A", type="Int")),
        )


def test_struct_fields_have_no_optional_flag() -> None:
    with pytest.raises(ValidationError):
        StructField(name="B", type="Int", optional=True)  # type: ignore[call-arg]


def test_extra_fields_are_forbidden() -> None:
    with pytest.raises(ValidationError):
        ListType(name="L", value="Int", unexpected=True)  # type: ignore[call-arg]


def test_validate_rejects_dangling_references_and_bad_keys() -> None:
    ts = TypeSystem()
    ts.accumulate(ScalarType(name="Int", scalar=Kind.INT))
    ts.accumulate(ListType(name="List__Missing", value="Missing"))
    with pytest.raises(ValueError, match="undeclared"):
        ts.validate()

    ts = TypeSystem()
    ts.accumulate(ScalarType(name="Int", scalar=Kind.INT))
    ts.accumulate(MapType(name="Map__ByInt", key="Int", value="Int"))
    with pytest.raises(ValueError, match="not a string type"):
        ts.validate()


def test_conflicting_redeclaration_is_rejected() -> None:
    ts = TypeSystem()
    ts.accumulate(ScalarType(name="X", scalar=Kind.INT))
    ts.accumulate(ScalarType(name="X", scalar=Kind.INT))  # identical is fine
    with pytest.raises(ValueError):
        ts.accumulate(ScalarType(name="X", scalar=Kind.BYTES))


def test_catalog_declares_actor_states_and_containers() -> None:
    names = set(list_types())
    for expected in (
        "LotusBlockHeader",
        "MinerV0State",
        "MarketV0DealProposal",
        "Map__LotusActors",
        "Map__PowerV0CronEvent",
        "Map__List__DealID",
    ):
        assert expected in names
    assert TYPE_SYSTEM.get("Map__LotusActors").key == "RawAddress"
    assert prototype("MinerV0State").kind is Kind.MAP
    assert prototype("List__DealID").kind is Kind.LIST
    assert prototype("MinerV0State") is prototype("MinerV0State")


def test_unknown_schema_type_is_a_resolution_error() -> None:
    with pytest.raises(ResolutionError):
        TYPE_SYSTEM.get("NoSuchType")


def test_freeze_builds_every_prototype_up_front() -> None:
    # Arrange
    ts = TypeSystem()
    ts.accumulate(ScalarType(name="Int", scalar=Kind.INT))
    ts.accumulate(ListType(name="List__Int", value="Int"))
    with pytest.raises(RuntimeError):
        ts.prototype("Int")

    # Act
    ts.freeze()

    # Assert
    assert ts.frozen
    assert ts.prototype("List__Int") is ts.prototype("List__Int")
    assert ts.prototype("Int").kind is Kind.INT
    with pytest.raises(ResolutionError):
        ts.prototype("Missing")
    with pytest.raises(RuntimeError, match="frozen"):
        ts.accumulate(ScalarType(name="Bytes", scalar=Kind.BYTES))


def test_catalog_is_frozen_at_import() -> None:
    assert TYPE_SYSTEM.frozen
    assert all(TYPE_SYSTEM.prototype(n).name == n for n in list_types())
