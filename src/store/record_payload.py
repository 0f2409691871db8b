"""Record-oriented payloads for containers.

This module converts a container into one dictionary per element and
back. Derived fields are never written: they are rebuilt on demand from
the stored fields of the restored container.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from core.config import SoAKitConfig
from core.constants import RECORD_ID_FIELD
from core.errors import FieldNotFoundError, InvalidArgumentError
from core.value import Value
from bulk.container import Bulk
from registry.field_registry import Registry


def bulk_to_records(bulk: Bulk) -> list[dict[str, Any]]:
    """Serialize a container into per-element records.

    Args:
        bulk: Container to serialize.

    Returns:
        One JSON-safe dictionary per element holding every stored data
        field. An ``id`` entry carries the element index unless a data
        field owns that name.
    """
    fields = bulk.list_data_fields()
    columns = {field: bulk.columns[field].elements() for field in fields}
    records: list[dict[str, Any]] = []
    for element_id in bulk.meta.ids:
        record: dict[str, Any] = {}
        if RECORD_ID_FIELD not in columns:
            record[RECORD_ID_FIELD] = element_id
        for field in fields:
            record[field] = columns[field][element_id].to_python()
        records.append(record)
    return records


def bulk_from_records(
    records: Sequence[Mapping[str, Any]],
    registry: Registry,
    config: SoAKitConfig | None = None,
) -> Bulk:
    """Rebuild a container from per-element records.

    Every registered stored field that appears in any record must appear
    in all of them. The ``id`` entry is informational and ignored unless
    the registry has a field of that name.

    Args:
        records: Record dictionaries in element order.
        registry: Registry describing the fields.
        config: Optional runtime configuration for the new container.

    Returns:
        Container with one ``set`` per stored field, in sorted field order.

    Raises:
        InvalidArgumentError: If records are empty, malformed, or missing
            a field.
        FieldNotFoundError: If a record names an unregistered field.
        ValidationFailedError: If a value fails its field validator.
    """
    if not records:
        raise InvalidArgumentError("Cannot create Bulk from empty records")
    field_names = _collect_field_names(records, registry)
    bulk = Bulk.new(len(records), config)
    for field in field_names:
        values = [_record_value(record, field, index) for index, record in enumerate(records)]
        bulk = bulk.set(registry, field, values)
    return bulk


def records_to_json(bulk: Bulk) -> str:
    """Serialize a container into a JSON array of records."""
    return json.dumps(bulk_to_records(bulk), sort_keys=True)


def records_from_json(
    payload: str,
    registry: Registry,
    config: SoAKitConfig | None = None,
) -> Bulk:
    """Rebuild a container from a JSON array of records.

    Args:
        payload: JSON text produced by ``records_to_json``.
        registry: Registry describing the fields.
        config: Optional runtime configuration for the new container.

    Returns:
        Restored container.

    Raises:
        InvalidArgumentError: If the JSON is invalid or not an array of
            objects.
    """
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as error:
        raise InvalidArgumentError(
            f"Invalid records JSON at line {error.lineno}: {error.msg}"
        ) from error
    if not isinstance(parsed, list):
        raise InvalidArgumentError("Expected JSON array of objects")
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise InvalidArgumentError(f"Record {index} is not an object")
    return bulk_from_records(parsed, registry, config)


def _collect_field_names(
    records: Sequence[Mapping[str, Any]],
    registry: Registry,
) -> list[str]:
    """Gather stored field names named by any record.

    Raises:
        FieldNotFoundError: If a name is not registered.
    """
    names: set[str] = set()
    for record in records:
        for name in record:
            if name == RECORD_ID_FIELD and not registry.has_field(name):
                continue
            metadata = registry.get_metadata(name)
            if metadata is None:
                raise FieldNotFoundError(name)
            if not metadata.is_derived:
                names.add(name)
    return sorted(names)


def _record_value(record: Mapping[str, Any], field: str, index: int) -> Value:
    if field not in record:
        raise InvalidArgumentError(f"Missing field '{field}' at index {index}")
    return Value.from_python(record[field])
