"""Unit tests for masked views."""

from __future__ import annotations

import pytest

from core.config import SoAKitConfig
from core.errors import IndexOutOfBoundsError, LengthMismatchError
from core.value import Value
from bulk.container import Bulk
from bulk.view import View
from registry.field_registry import Registry


def _scores() -> tuple[Registry, Bulk]:
    registry = Registry()
    registry.register("score", lambda value: True)
    registry.register("team", lambda value: True)
    bulk = Bulk.new(4, SoAKitConfig())
    bulk = bulk.set(registry, "score", [1.5, 2.5, 3.5, 4.5])
    bulk = bulk.set(registry, "team", ["red", "blue", "red", "blue"])
    return registry, bulk


def test_view_rejects_mask_length_mismatch() -> None:
    """Masks must match the container count."""
    _, bulk = _scores()

    with pytest.raises(LengthMismatchError):
        View(Value.scalar("red"), [True, False], bulk)


def test_view_get_field_filters_by_mask() -> None:
    """View reads should keep only selected elements in order."""
    registry, bulk = _scores()
    view = View(Value.scalar("any"), [False, True, False, True], bulk)

    assert view.get_field(registry, "score") == Value.vector([2.5, 4.5])


def test_empty_view_reports_empty() -> None:
    """A mask with no selection should give an empty view."""
    _, bulk = _scores()

    view = View(Value.scalar("none"), [False] * 4, bulk)

    assert (view.is_empty(), view.count()) == (True, 0)


def test_partition_views_read_their_group() -> None:
    """Partition views should read values of their own key only."""
    registry, bulk = _scores()

    red, blue = bulk.partition_by(registry, "team")

    assert (red.key, red.get_field(registry, "score"), blue.indices()) == (
        Value.scalar("red"),
        Value.vector([1.5, 3.5]),
        (1, 3),
    )


def test_view_raises_for_column_shorter_than_selection() -> None:
    """Selected indices past a short derived column should fail."""
    registry, bulk = _scores()
    registry.register(
        "head",
        lambda value: True,
        is_derived=True,
        dependencies=["score"],
        derived_func=lambda values: Value.vector(values[0].data[:1]),
    )
    view = View(Value.scalar("tail"), [True, False, True, False], bulk)

    with pytest.raises(IndexOutOfBoundsError) as error:
        view.get_field(registry, "head")

    assert (error.value.index, error.value.max) == (2, 0)
