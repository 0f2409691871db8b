"""Masked, key-tagged partition of a container snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from core.errors import IndexOutOfBoundsError, InvalidArgumentError, LengthMismatchError
from core.value import Value
from registry.field_registry import Registry

if TYPE_CHECKING:
    from bulk.container import Bulk


class View:
    """Subset of a shared container selected by a boolean mask.

    Views produced by ``Bulk.partition_by`` carry the partition key
    shared by every selected element.
    """

    def __init__(self, key: Value, mask: Sequence[bool], parent: "Bulk") -> None:
        """Bind a mask to a container.

        Args:
            key: Partition key of the selected elements.
            mask: One inclusion flag per container element.
            parent: Container snapshot to read from.

        Raises:
            LengthMismatchError: If the mask length differs from the
                container count.
        """
        if len(mask) != parent.count():
            raise LengthMismatchError(expected=parent.count(), actual=len(mask))
        self._key = key
        self._mask = tuple(bool(flag) for flag in mask)
        self._parent = parent
        self._indices = tuple(index for index, flag in enumerate(self._mask) if flag)

    @property
    def key(self) -> Value:
        return self._key

    @property
    def mask(self) -> tuple[bool, ...]:
        return self._mask

    @property
    def parent(self) -> "Bulk":
        return self._parent

    def indices(self) -> tuple[int, ...]:
        """Selected element indices in ascending order."""
        return self._indices

    def count(self) -> int:
        return len(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def is_empty(self) -> bool:
        return not self._indices

    def get_field(self, registry: Registry, field: str) -> Value:
        """Read the selected elements of one field.

        Args:
            registry: Registry describing the field.
            field: Stored or derived field name.

        Returns:
            Vector holding the selected elements in index order.

        Raises:
            FieldNotFoundError: If the container cannot read the field.
            InvalidArgumentError: If the column is not a vector.
            IndexOutOfBoundsError: If the column is shorter than a selected
                index.
        """
        column = self._parent.get(registry, field)
        if not column.is_vector:
            raise InvalidArgumentError("Field value is not a vector")
        for index in self._indices:
            if index >= len(column):
                raise IndexOutOfBoundsError(index=index, max=len(column) - 1)
        return column.take(self._indices)

    def __repr__(self) -> str:
        return f"View(key={self._key!r}, count={self.count()})"
