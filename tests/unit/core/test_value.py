"""Unit tests for the tagged value model."""

from __future__ import annotations

import math

import pytest

from core.errors import IndexOutOfBoundsError, InvalidArgumentError
from core.value import Value, ValueKind


def test_scalar_infers_bool_before_int() -> None:
    """Booleans should never be treated as integers."""
    value = Value.scalar(True)

    assert value.kind is ValueKind.SCALAR_BOOL


def test_vector_rejects_mixed_python_types() -> None:
    """Vector items must all fit the inferred kind."""
    with pytest.raises(InvalidArgumentError):
        Value.vector([1, 2.5])


def test_float_vector_accepts_ints() -> None:
    """Integers should be stored as floats in float vectors."""
    value = Value.vector([1.5, 2])

    assert value.data == (1.5, 2.0)


def test_empty_vector_requires_kind() -> None:
    """Empty vectors cannot infer their kind."""
    with pytest.raises(InvalidArgumentError):
        Value.vector([])


def test_get_element_returns_scalar() -> None:
    """Element access should return the scalar at the index."""
    value = Value.vector(["a", "b", "c"])

    assert value.get_element(1) == Value.scalar("b")


def test_get_element_raises_out_of_range() -> None:
    """Element access beyond the vector should fail with its length."""
    value = Value.vector([1, 2])

    with pytest.raises(IndexOutOfBoundsError) as error:
        value.get_element(2)

    assert (error.value.index, error.value.max) == (2, 2)


def test_get_element_raises_for_scalar() -> None:
    """Element access only works on vectors."""
    with pytest.raises(InvalidArgumentError):
        Value.scalar(3).get_element(0)


def test_from_scalars_packs_vector() -> None:
    """Scalars of one kind should pack into the matching vector."""
    value = Value.from_scalars([Value.scalar(1), Value.scalar(2)])

    assert value == Value.vector([1, 2])


def test_from_scalars_rejects_mixed_kinds() -> None:
    """Packing scalars of different kinds should fail."""
    with pytest.raises(InvalidArgumentError):
        Value.from_scalars([Value.scalar(1), Value.scalar("x")])


def test_from_scalars_packs_matrix_rows() -> None:
    """Non-scalar elements should pack into a matrix."""
    value = Value.from_scalars([Value.vector([1, 2]), Value.vector([3, 4])])

    assert (value.is_matrix, value.rank, value.shape) == (True, 2, (2, 2))


def test_matrix_rejects_rows_of_different_kinds() -> None:
    """Matrix rows must share one kind."""
    with pytest.raises(InvalidArgumentError):
        Value.matrix([Value.vector([1]), Value.vector([1.0])])


def test_matrix_rejects_scalar_rows() -> None:
    """Matrix rows must be vectors or matrices."""
    with pytest.raises(InvalidArgumentError):
        Value.matrix([Value.scalar(1)])


def test_empty_matrix_has_rank_two() -> None:
    """Empty matrices report rank two and a zero row count."""
    value = Value.matrix([])

    assert (value.rank, value.shape, value.is_empty()) == (2, (0,), True)


def test_scalar_length_is_one() -> None:
    """Scalars count as a single element."""
    assert len(Value.scalar(1.5)) == 1


def test_elements_inverts_from_scalars() -> None:
    """Unpacking a vector should give its scalars in order."""
    value = Value.vector([True, False])

    assert value.elements() == (Value.scalar(True), Value.scalar(False))


def test_take_selects_indices() -> None:
    """Selection should keep kind and follow the index order."""
    value = Value.vector([10, 20, 30, 40])

    assert value.take([3, 0]) == Value.vector([40, 10])


def test_partition_key_groups_nan() -> None:
    """Distinct NaN scalars should share one partition key."""
    first = Value.scalar(math.nan)
    second = Value.scalar(float("nan"))

    assert first.partition_key() == second.partition_key()


def test_from_python_builds_matrix_from_nested_lists() -> None:
    """Nested lists should convert into matrices of vectors."""
    value = Value.from_python([[1, 2], [3, 4]])

    assert value.to_python() == [[1, 2], [3, 4]]


def test_repr_names_variant() -> None:
    """Repr should name the variant and its data."""
    assert repr(Value.vector([1, 2])) == "VectorInt((1, 2))"


def test_from_python_rejects_unsupported_type() -> None:
    """Unsupported Python objects should fail conversion."""
    with pytest.raises(InvalidArgumentError):
        Value.from_python({"a": 1})
