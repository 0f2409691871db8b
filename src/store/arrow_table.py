"""Apache Arrow interchange for containers.

This module maps stored container columns onto an Arrow table and back.
Vector columns become primitive Arrow columns and matrix columns become
list columns; derived fields are not materialized.
"""

from __future__ import annotations

import pyarrow as pa

from core.config import SoAKitConfig
from core.constants import RECORD_ID_FIELD
from core.errors import FieldNotFoundError, InvalidArgumentError
from core.value import Value, ValueKind
from bulk.container import Bulk
from registry.field_registry import Registry

_ARROW_TYPES = {
    ValueKind.VECTOR_INT: pa.int64(),
    ValueKind.VECTOR_FLOAT: pa.float64(),
    ValueKind.VECTOR_BOOL: pa.bool_(),
    ValueKind.VECTOR_STRING: pa.string(),
}


def bulk_to_arrow_table(bulk: Bulk) -> pa.Table:
    """Convert stored container columns into an Arrow table.

    Args:
        bulk: Container to convert.

    Returns:
        Table with every stored data field, preceded by an ``id`` column
        of element indices unless a data field owns that name.
    """
    fields = bulk.list_data_fields()
    arrays: dict[str, pa.Array] = {}
    if RECORD_ID_FIELD not in fields:
        arrays[RECORD_ID_FIELD] = pa.array(list(bulk.meta.ids), type=pa.int64())
    for field in fields:
        column = bulk.columns[field]
        arrays[field] = pa.array(column.to_python(), type=_ARROW_TYPES.get(column.kind))
    return pa.table(arrays)


def bulk_from_arrow_table(
    table: pa.Table,
    registry: Registry,
    config: SoAKitConfig | None = None,
) -> Bulk:
    """Rebuild a container from an Arrow table.

    Args:
        table: Table whose columns name registered stored fields; an
            ``id`` column is ignored unless the registry has that field.
        registry: Registry describing the fields.
        config: Optional runtime configuration for the new container.

    Returns:
        Container with one ``set`` per column, in sorted column order.

    Raises:
        InvalidArgumentError: If the table is empty, names a derived field,
            or holds nulls.
        FieldNotFoundError: If a column names an unregistered field.
        ValidationFailedError: If a value fails its field validator.
    """
    if table.num_rows == 0:
        raise InvalidArgumentError("Cannot create Bulk from an empty table")
    bulk = Bulk.new(table.num_rows, config)
    for field in sorted(table.column_names):
        if field == RECORD_ID_FIELD and not registry.has_field(field):
            continue
        metadata = registry.get_metadata(field)
        if metadata is None:
            raise FieldNotFoundError(field)
        if metadata.is_derived:
            raise InvalidArgumentError(f"Column '{field}' names a derived field")
        column = table.column(field)
        if column.null_count:
            raise InvalidArgumentError(
                f"Column '{field}' holds {column.null_count} null values"
            )
        values = [Value.from_python(item) for item in column.to_pylist()]
        bulk = bulk.set(registry, field, values)
    return bulk
