"""Unit tests for field registration and dependency resolution."""

from __future__ import annotations

import pytest

from core.errors import (
    DerivedFieldNoDepsError,
    FieldAlreadyExistsError,
    FieldNotFoundError,
    InvalidArgumentError,
)
from core.value import Value
from registry.field_metadata import FieldSpec
from registry.field_registry import Registry


def _accept(_value: Value) -> bool:
    return True


def _first(values: list[Value]) -> Value:
    return values[0]


def test_register_stores_metadata() -> None:
    """Registered fields should expose their metadata."""
    registry = Registry()

    registry.register("age", _accept)

    assert registry.get_metadata("age").is_derived is False


def test_register_rejects_duplicate_name() -> None:
    """Registering a name twice should fail."""
    registry = Registry()
    registry.register("age", _accept)

    with pytest.raises(FieldAlreadyExistsError):
        registry.register("age", _accept)


@pytest.mark.parametrize("name", ["", "_internal"])
def test_register_rejects_invalid_names(name: str) -> None:
    """Empty and reserved names should be rejected."""
    registry = Registry()

    with pytest.raises(InvalidArgumentError):
        registry.register(name, _accept)


def test_register_derived_requires_dependencies() -> None:
    """Derived fields without dependencies should fail."""
    registry = Registry()

    with pytest.raises(DerivedFieldNoDepsError):
        registry.register("total", _accept, is_derived=True, derived_func=_first)


def test_register_derived_requires_function() -> None:
    """Derived fields without a function should fail."""
    registry = Registry()

    with pytest.raises(InvalidArgumentError, match="derived function"):
        registry.register("total", _accept, is_derived=True, dependencies=["a"])


def test_register_stored_rejects_dependencies() -> None:
    """Stored fields cannot declare dependencies."""
    registry = Registry()

    with pytest.raises(InvalidArgumentError):
        registry.register("a", _accept, dependencies=["b"])


def test_register_rejects_bare_string_dependencies() -> None:
    """A single string is not a dependency list."""
    registry = Registry()

    with pytest.raises(InvalidArgumentError):
        registry.register("total", _accept, is_derived=True, dependencies="ab", derived_func=_first)


def test_validate_unknown_field_is_false() -> None:
    """Unknown fields never validate."""
    registry = Registry()

    assert registry.validate("missing", Value.scalar(1)) is False


def test_validate_runs_validator() -> None:
    """Validation should delegate to the field predicate."""
    registry = Registry()
    registry.register("age", lambda value: value.data >= 0)

    assert [registry.validate("age", Value.scalar(n)) for n in (3, -1)] == [True, False]


def test_list_fields_is_sorted() -> None:
    """Field listing should be sorted by name."""
    registry = Registry()
    for name in ("b", "c", "a"):
        registry.register(name, _accept)

    assert registry.list_fields() == ["a", "b", "c"]


def test_require_metadata_raises_for_unknown_field() -> None:
    """Strict lookup should fail for unknown names."""
    registry = Registry()

    with pytest.raises(FieldNotFoundError):
        registry.require_metadata("missing")


def test_register_all_is_atomic() -> None:
    """A failing batch should leave the registry unchanged."""
    registry = Registry()
    specs = [
        FieldSpec(name="a", validator=_accept),
        FieldSpec(name="a", validator=_accept),
    ]

    with pytest.raises(FieldAlreadyExistsError):
        registry.register_all(specs)

    assert len(registry) == 0


def test_register_all_inserts_every_spec() -> None:
    """A valid batch should register every field."""
    registry = Registry()
    specs = [
        FieldSpec(name="a", validator=_accept),
        FieldSpec(
            name="copy",
            validator=_accept,
            is_derived=True,
            dependencies=("a",),
            derived_func=_first,
        ),
    ]

    registry.register_all(specs)

    assert "a" in registry and "copy" in registry


def test_resolve_dependencies_orders_transitively() -> None:
    """Dependencies should precede their dependents."""
    registry = Registry()
    registry.register("a", _accept)
    registry.register("b", _accept)
    registry.register("ab", _accept, is_derived=True, dependencies=["a", "b"], derived_func=_first)
    registry.register("top", _accept, is_derived=True, dependencies=["ab", "a"], derived_func=_first)

    assert registry.resolve_dependencies("top") == ("a", "b", "ab")


def test_resolve_dependencies_detects_cycle() -> None:
    """Cyclic derived fields should be reported."""
    registry = Registry()
    registry.register("x", _accept, is_derived=True, dependencies=["y"], derived_func=_first)
    registry.register("y", _accept, is_derived=True, dependencies=["x"], derived_func=_first)

    with pytest.raises(InvalidArgumentError, match="cycle"):
        registry.resolve_dependencies("x")


def test_resolve_dependencies_raises_for_unknown_dependency() -> None:
    """Unregistered dependencies should be reported."""
    registry = Registry()
    registry.register("x", _accept, is_derived=True, dependencies=["ghost"], derived_func=_first)

    with pytest.raises(FieldNotFoundError):
        registry.resolve_dependencies("x")
