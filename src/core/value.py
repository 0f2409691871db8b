"""Tagged scalar, vector, and matrix values.

This module defines the immutable ``Value`` union stored in containers.
A column of per-element scalars is packed into one vector value, and
nested non-scalar elements are packed into a homogeneous matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Iterable, Sequence

from core.errors import IndexOutOfBoundsError, InvalidArgumentError


class ValueKind(str, Enum):
    """Variant tags of the ``Value`` union."""

    SCALAR_INT = "scalar_int"
    SCALAR_FLOAT = "scalar_float"
    SCALAR_BOOL = "scalar_bool"
    SCALAR_STRING = "scalar_string"
    VECTOR_INT = "vector_int"
    VECTOR_FLOAT = "vector_float"
    VECTOR_BOOL = "vector_bool"
    VECTOR_STRING = "vector_string"
    MATRIX = "matrix"


SCALAR_KINDS = frozenset(
    {
        ValueKind.SCALAR_INT,
        ValueKind.SCALAR_FLOAT,
        ValueKind.SCALAR_BOOL,
        ValueKind.SCALAR_STRING,
    }
)
VECTOR_KINDS = frozenset(
    {
        ValueKind.VECTOR_INT,
        ValueKind.VECTOR_FLOAT,
        ValueKind.VECTOR_BOOL,
        ValueKind.VECTOR_STRING,
    }
)
VECTOR_KIND_BY_SCALAR = {
    ValueKind.SCALAR_INT: ValueKind.VECTOR_INT,
    ValueKind.SCALAR_FLOAT: ValueKind.VECTOR_FLOAT,
    ValueKind.SCALAR_BOOL: ValueKind.VECTOR_BOOL,
    ValueKind.SCALAR_STRING: ValueKind.VECTOR_STRING,
}
SCALAR_KIND_BY_VECTOR = {vector: scalar for scalar, vector in VECTOR_KIND_BY_SCALAR.items()}

_NAN_KEY = "nan"


@dataclass(frozen=True)
class Value:
    """Immutable tagged value.

    Attributes:
        kind: Variant tag.
        data: Python scalar for scalar kinds, tuple of Python scalars for
            vector kinds, tuple of ``Value`` rows for matrices.
    """

    kind: ValueKind
    data: Any

    def __post_init__(self) -> None:
        if self.kind in SCALAR_KINDS:
            object.__setattr__(self, "data", _coerce_scalar(self.kind, self.data))
        elif self.kind in VECTOR_KINDS:
            scalar_kind = SCALAR_KIND_BY_VECTOR[self.kind]
            items = tuple(_coerce_scalar(scalar_kind, item) for item in _as_sequence(self.data))
            object.__setattr__(self, "data", items)
        else:
            rows = tuple(_as_sequence(self.data))
            _check_matrix_rows(rows)
            object.__setattr__(self, "data", rows)

    def __repr__(self) -> str:
        label = "".join(part.capitalize() for part in self.kind.value.split("_"))
        return f"{label}({self.data!r})"

    @classmethod
    def scalar(cls, item: object) -> "Value":
        """Build a scalar value, inferring its kind from the Python type.

        Args:
            item: Python ``int``, ``float``, ``bool`` or ``str``.

        Returns:
            Matching scalar value.

        Raises:
            InvalidArgumentError: If the Python type has no scalar kind.
        """
        return cls(_infer_scalar_kind(item), item)

    @classmethod
    def vector(cls, items: Iterable[object], kind: ValueKind | None = None) -> "Value":
        """Build a vector value from Python scalars.

        Args:
            items: Python scalars of one type.
            kind: Vector kind; required when ``items`` is empty.

        Returns:
            Vector value.

        Raises:
            InvalidArgumentError: If the kind cannot be inferred or items
                do not match it.
        """
        items = tuple(items)
        if kind is None:
            if not items:
                raise InvalidArgumentError(
                    "Cannot infer the kind of an empty vector; pass kind explicitly"
                )
            kind = VECTOR_KIND_BY_SCALAR[_infer_scalar_kind(items[0])]
        if kind not in VECTOR_KINDS:
            raise InvalidArgumentError(f"{kind.value} is not a vector kind")
        return cls(kind, items)

    @classmethod
    def matrix(cls, rows: Iterable["Value"]) -> "Value":
        """Build a matrix from homogeneous non-scalar rows."""
        return cls(ValueKind.MATRIX, tuple(rows))

    @classmethod
    def from_scalars(cls, values: Sequence["Value"]) -> "Value":
        """Pack per-element values into one column value.

        Scalars of one kind become the matching vector. Non-scalar
        elements become a matrix whose rows are those elements.

        Args:
            values: One value per element, in element order.

        Returns:
            Column value holding every element.

        Raises:
            InvalidArgumentError: If values are empty or of mixed kinds.
        """
        if not values:
            raise InvalidArgumentError("Values cannot be empty")
        first = values[0]
        if not first.is_scalar:
            return cls.matrix(values)
        for index, value in enumerate(values):
            if value.kind is not first.kind:
                raise InvalidArgumentError(
                    f"Value at index {index} is {value.kind.value}, expected {first.kind.value}"
                )
        return cls(VECTOR_KIND_BY_SCALAR[first.kind], tuple(value.data for value in values))

    @classmethod
    def from_python(cls, obj: object) -> "Value":
        """Convert plain Python data into a value.

        Lists and tuples of scalars become vectors, nested lists become
        matrices, and ``Value`` instances pass through unchanged.

        Args:
            obj: Python scalar, sequence, or ``Value``.

        Returns:
            Converted value.
        """
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, (list, tuple)):
            if obj and all(isinstance(item, (list, tuple, Value)) for item in obj):
                return cls.matrix(cls.from_python(item) for item in obj)
            return cls.vector(obj)
        return cls.scalar(obj)

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_vector(self) -> bool:
        return self.kind in VECTOR_KINDS

    @property
    def is_matrix(self) -> bool:
        return self.kind is ValueKind.MATRIX

    @property
    def rank(self) -> int:
        """Number of nesting levels: 0 scalar, 1 vector, 2+ matrix."""
        if self.is_scalar:
            return 0
        if self.is_vector:
            return 1
        if not self.data:
            return 2
        return 1 + self.data[0].rank

    @property
    def shape(self) -> tuple[int, ...]:
        """Dimension sizes, taken from the first row for matrices."""
        if self.is_scalar:
            return ()
        if self.is_vector or not self.data:
            return (len(self.data),)
        return (len(self.data),) + self.data[0].shape

    @property
    def element_kind(self) -> ValueKind:
        """Kind of the values returned by ``get_element`` and ``elements``.

        Raises:
            InvalidArgumentError: For scalars and empty matrices.
        """
        if self.is_vector:
            return SCALAR_KIND_BY_VECTOR[self.kind]
        if self.is_matrix and self.data:
            return self.data[0].kind
        raise InvalidArgumentError(f"{self.kind.value} value has no element kind")

    def __len__(self) -> int:
        if self.is_scalar:
            return 1
        return len(self.data)

    def is_empty(self) -> bool:
        return len(self) == 0

    def get_element(self, idx: int) -> "Value":
        """Extract the scalar at ``idx`` of a vector.

        Args:
            idx: Zero-based element index.

        Returns:
            Scalar value at the index.

        Raises:
            IndexOutOfBoundsError: If ``idx`` is outside the vector.
            InvalidArgumentError: If this value is not a vector.
        """
        if not self.is_vector:
            raise InvalidArgumentError("get_element only works on vectors")
        if idx < 0 or idx >= len(self.data):
            raise IndexOutOfBoundsError(index=idx, max=len(self.data))
        return Value(SCALAR_KIND_BY_VECTOR[self.kind], self.data[idx])

    def elements(self) -> tuple["Value", ...]:
        """Unpack a vector or matrix into per-element values.

        Raises:
            InvalidArgumentError: If this value is a scalar.
        """
        if self.is_vector:
            scalar_kind = SCALAR_KIND_BY_VECTOR[self.kind]
            return tuple(Value(scalar_kind, item) for item in self.data)
        if self.is_matrix:
            return self.data
        raise InvalidArgumentError("Scalar values have no elements")

    def take(self, indices: Iterable[int]) -> "Value":
        """Select elements by index, keeping the value kind.

        Args:
            indices: In-range element indices, in output order.

        Returns:
            Vector or matrix holding the selected elements.
        """
        if self.is_scalar:
            raise InvalidArgumentError("Cannot select elements of a scalar value")
        return Value(self.kind, tuple(self.data[idx] for idx in indices))

    def partition_key(self) -> tuple[str, object]:
        """Hashable key giving equality by value, with all NaNs equal."""
        if self.kind is ValueKind.SCALAR_FLOAT and math.isnan(self.data):
            return (self.kind.value, _NAN_KEY)
        if self.is_matrix:
            return (self.kind.value, tuple(row.partition_key() for row in self.data))
        return (self.kind.value, self.data)

    def to_python(self) -> Any:
        """Convert to plain Python scalars and lists."""
        if self.is_scalar:
            return self.data
        if self.is_vector:
            return list(self.data)
        return [row.to_python() for row in self.data]


def _infer_scalar_kind(item: object) -> ValueKind:
    """Map a Python scalar type onto a scalar kind.

    Args:
        item: Python value.

    Returns:
        Scalar kind for the value.

    Raises:
        InvalidArgumentError: If the type is unsupported.
    """
    if isinstance(item, bool):
        return ValueKind.SCALAR_BOOL
    if isinstance(item, int):
        return ValueKind.SCALAR_INT
    if isinstance(item, float):
        return ValueKind.SCALAR_FLOAT
    if isinstance(item, str):
        return ValueKind.SCALAR_STRING
    raise InvalidArgumentError(f"Unsupported scalar type: {type(item).__name__}")


def _coerce_scalar(kind: ValueKind, item: object) -> object:
    """Check a Python scalar against a scalar kind.

    Integers are accepted for float kinds and stored as floats; ``bool``
    is never accepted as a number.

    Raises:
        InvalidArgumentError: If the item does not fit the kind.
    """
    if kind is ValueKind.SCALAR_BOOL and isinstance(item, bool):
        return item
    if isinstance(item, bool):
        raise InvalidArgumentError(f"Expected {kind.value}, got bool")
    if kind is ValueKind.SCALAR_INT and isinstance(item, int):
        return item
    if kind is ValueKind.SCALAR_FLOAT and isinstance(item, (int, float)):
        return float(item)
    if kind is ValueKind.SCALAR_STRING and isinstance(item, str):
        return item
    raise InvalidArgumentError(f"Expected {kind.value}, got {type(item).__name__}")


def _as_sequence(data: object) -> Sequence[Any]:
    if isinstance(data, (list, tuple)):
        return data
    raise InvalidArgumentError(f"Expected a list or tuple, got {type(data).__name__}")


def _check_matrix_rows(rows: tuple[Any, ...]) -> None:
    """Enforce matrix homogeneity.

    Rows must be non-scalar values sharing one kind and one rank.

    Raises:
        InvalidArgumentError: If any row breaks homogeneity.
    """
    if not rows:
        return
    for index, row in enumerate(rows):
        if not isinstance(row, Value) or row.is_scalar:
            raise InvalidArgumentError(f"Matrix row {index} must be a vector or matrix value")
    first = rows[0]
    for index, row in enumerate(rows[1:], 1):
        if row.kind is not first.kind or row.rank != first.rank:
            raise InvalidArgumentError(
                f"Matrix row {index} is {row.kind.value} of rank {row.rank}, "
                f"expected {first.kind.value} of rank {first.rank}"
            )
