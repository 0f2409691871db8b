"""Single-element handle into a container snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.errors import IndexOutOfBoundsError, InvalidArgumentError
from core.value import Value
from registry.field_registry import Registry

if TYPE_CHECKING:
    from bulk.container import Bulk


class Proxy:
    """Reference to one element index of a shared container.

    The proxy keeps its container snapshot alive and never copies or
    mutates column data; every read goes through the container's ``get``.
    """

    def __init__(self, bulk: "Bulk", index: int) -> None:
        """Bind a proxy to an element of a container.

        Args:
            bulk: Container snapshot to read from.
            index: Element index in ``0..count-1``.

        Raises:
            IndexOutOfBoundsError: If the index is out of range.
        """
        count = bulk.count()
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
            raise IndexOutOfBoundsError(index=index, max=count - 1)
        self._bulk = bulk
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def bulk(self) -> "Bulk":
        return self._bulk

    def get_field(self, registry: Registry, field: str) -> Value:
        """Read one field's value for this element.

        Args:
            registry: Registry describing the field.
            field: Stored or derived field name.

        Returns:
            Scalar value at this proxy's index.

        Raises:
            FieldNotFoundError: If the container cannot read the field.
            InvalidArgumentError: If the column is not a vector.
            IndexOutOfBoundsError: If the column is shorter than the index.
        """
        column = self._bulk.get(registry, field)
        if not column.is_vector:
            raise InvalidArgumentError("Field value is not a vector")
        return column.get_element(self._index)

    def to_dict(self, registry: Registry) -> dict[str, Value]:
        """Collect every stored data field of this element."""
        return {
            field: self.get_field(registry, field)
            for field in self._bulk.list_data_fields()
        }

    def __repr__(self) -> str:
        return f"Proxy(index={self._index}, count={self._bulk.count()})"
