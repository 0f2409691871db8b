"""Unit tests for record payload conversion."""

from __future__ import annotations

import json

import pytest

from core.config import SoAKitConfig
from core.errors import FieldNotFoundError, InvalidArgumentError
from core.value import Value
from bulk.container import Bulk
from registry.field_registry import Registry
from store.record_payload import (
    bulk_from_records,
    bulk_to_records,
    records_from_json,
    records_to_json,
)


def _registry() -> Registry:
    registry = Registry()
    registry.register("age", lambda value: value.data >= 0)
    registry.register("name", lambda value: True)
    registry.register(
        "age_next",
        lambda value: True,
        is_derived=True,
        dependencies=["age"],
        derived_func=lambda values: Value.vector([item + 1 for item in values[0].data]),
    )
    return registry


def _bulk(registry: Registry) -> Bulk:
    bulk = Bulk.new(2, SoAKitConfig())
    bulk = bulk.set(registry, "age", [30, 41])
    return bulk.set(registry, "name", ["ada", "bob"])


def test_bulk_to_records_emits_one_row_per_element() -> None:
    """Records should carry ids and stored fields."""
    registry = _registry()

    records = bulk_to_records(_bulk(registry))

    assert records == [
        {"id": 0, "age": 30, "name": "ada"},
        {"id": 1, "age": 41, "name": "bob"},
    ]


def test_bulk_from_records_restores_columns() -> None:
    """Restored containers should hold the recorded values."""
    registry = _registry()
    records = bulk_to_records(_bulk(registry))

    restored = bulk_from_records(records, registry)

    assert restored.get(registry, "name") == Value.vector(["ada", "bob"])


def test_bulk_from_records_rebuilds_derived_fields() -> None:
    """Derived entries in records should be ignored and recomputed."""
    registry = _registry()
    records = [{"id": 0, "age": 1, "age_next": 99}, {"id": 1, "age": 2, "age_next": 99}]

    restored = bulk_from_records(records, registry)

    assert restored.get(registry, "age_next") == Value.vector([2, 3])


def test_bulk_from_records_raises_for_empty_input() -> None:
    """Containers cannot be built from zero records."""
    with pytest.raises(InvalidArgumentError):
        bulk_from_records([], _registry())


def test_bulk_from_records_raises_for_unknown_field() -> None:
    """Records naming unregistered fields should fail."""
    with pytest.raises(FieldNotFoundError):
        bulk_from_records([{"height": 3}], _registry())


def test_bulk_from_records_raises_for_missing_field() -> None:
    """Every record must carry every recorded field."""
    records = [{"age": 1, "name": "ada"}, {"age": 2}]

    with pytest.raises(InvalidArgumentError, match="Missing field 'name' at index 1"):
        bulk_from_records(records, _registry())


def test_records_to_json_sorts_keys() -> None:
    """JSON payload should be stable across runs."""
    registry = _registry()

    payload = records_to_json(_bulk(registry))

    assert json.loads(payload)[0] == {"age": 30, "id": 0, "name": "ada"}


def test_records_from_json_round_trips() -> None:
    """JSON payloads should rebuild the stored columns."""
    registry = _registry()
    payload = records_to_json(_bulk(registry))

    restored = records_from_json(payload, registry)

    assert restored.get(registry, "age") == Value.vector([30, 41])


def test_records_from_json_raises_for_invalid_json() -> None:
    """Malformed JSON should fail with an argument error."""
    with pytest.raises(InvalidArgumentError, match="Invalid records JSON"):
        records_from_json("[{", _registry())


def test_records_from_json_raises_for_non_array() -> None:
    """Top-level JSON must be an array."""
    with pytest.raises(InvalidArgumentError):
        records_from_json('{"age": 1}', _registry())


def test_records_round_trip_keeps_data_field_named_id() -> None:
    """A registered id field should own the id entry."""
    registry = Registry()
    registry.register("id", lambda value: True)
    registry.register("x", lambda value: True)
    bulk = Bulk.new(3, SoAKitConfig()).set(registry, "id", [100, 200, 300])
    bulk = bulk.set(registry, "x", [1, 2, 3])

    restored = bulk_from_records(bulk_to_records(bulk), registry)

    assert (restored.list_data_fields(), restored.get(registry, "id")) == (
        ["id", "x"],
        Value.vector([100, 200, 300]),
    )
