"""Field registry.

This module owns field metadata keyed by name. Registration is
append-only: metadata never changes once inserted, so containers built
against a registry always see the same rules for a given name.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from core.errors import (
    DerivedFieldNoDepsError,
    FieldAlreadyExistsError,
    FieldNotFoundError,
    InvalidArgumentError,
)
from core.field_names import is_valid_field_name
from core.logging_config import get_logger
from core.value import Value
from registry.field_metadata import DerivedFunc, FieldMetadata, FieldSpec, Validator

_LOGGER = get_logger(__name__)


class Registry:
    """Mapping from field name to immutable field metadata."""

    def __init__(self) -> None:
        self._fields: dict[str, FieldMetadata] = {}

    def register(
        self,
        name: str,
        validator: Validator,
        is_derived: bool = False,
        dependencies: Sequence[str] = (),
        derived_func: DerivedFunc | None = None,
    ) -> None:
        """Register one field.

        Args:
            name: Field name; non-empty and outside the reserved prefix.
            validator: Predicate over a single value.
            is_derived: Whether the field is computed from dependencies.
            dependencies: Ordered dependency names, derived fields only.
            derived_func: Computation function, derived fields only.

        Raises:
            InvalidArgumentError: If the name is invalid or the derived
                arguments are inconsistent.
            FieldAlreadyExistsError: If the name is already registered.
            DerivedFieldNoDepsError: If a derived field has no dependencies.
        """
        spec = FieldSpec(
            name=name,
            validator=validator,
            is_derived=is_derived,
            dependencies=_as_dependency_tuple(dependencies),
            derived_func=derived_func,
        )
        metadata = _build_metadata(spec, self._fields.keys())
        self._fields[name] = metadata
        _log_registered(name, metadata)

    def register_all(self, specs: Iterable[FieldSpec]) -> None:
        """Register a closed set of fields atomically.

        Every spec is checked before any is inserted, so a failing batch
        leaves the registry unchanged.

        Args:
            specs: Field registration specs.

        Raises:
            InvalidArgumentError: If any spec is invalid.
            FieldAlreadyExistsError: If a name repeats or is already registered.
            DerivedFieldNoDepsError: If a derived spec has no dependencies.
        """
        taken = set(self._fields)
        staged: list[tuple[str, FieldMetadata]] = []
        for spec in specs:
            normalized = FieldSpec(
                name=spec.name,
                validator=spec.validator,
                is_derived=spec.is_derived,
                dependencies=_as_dependency_tuple(spec.dependencies),
                derived_func=spec.derived_func,
            )
            staged.append((spec.name, _build_metadata(normalized, taken)))
            taken.add(spec.name)
        for name, metadata in staged:
            self._fields[name] = metadata
            _log_registered(name, metadata)

    def validate(self, field: str, value: Value) -> bool:
        """Run a field validator; unknown fields never validate."""
        metadata = self._fields.get(field)
        if metadata is None:
            return False
        return bool(metadata.validator(value))

    def get_metadata(self, field: str) -> FieldMetadata | None:
        return self._fields.get(field)

    def require_metadata(self, field: str) -> FieldMetadata:
        """Return metadata for a registered field.

        Raises:
            FieldNotFoundError: If the field is not registered.
        """
        metadata = self._fields.get(field)
        if metadata is None:
            raise FieldNotFoundError(field)
        return metadata

    def has_field(self, field: str) -> bool:
        return field in self._fields

    def list_fields(self) -> list[str]:
        """Return registered field names in sorted order."""
        return sorted(self._fields)

    def resolve_dependencies(self, field: str) -> tuple[str, ...]:
        """Resolve transitive dependencies in evaluation order.

        Every dependency appears before the fields that depend on it, and
        declared order is kept among siblings. The field itself is not
        included.

        Args:
            field: Registered field name.

        Returns:
            Ordered transitive dependency names.

        Raises:
            FieldNotFoundError: If the field or a dependency is unknown.
            InvalidArgumentError: If the dependency graph has a cycle.
        """
        ordered: list[str] = []
        done: set[str] = set()
        self._visit(field, ordered, done, ())
        return tuple(name for name in ordered if name != field)

    def _visit(
        self,
        field: str,
        ordered: list[str],
        done: set[str],
        path: tuple[str, ...],
    ) -> None:
        if field in done:
            return
        if field in path:
            cycle = " -> ".join(path + (field,))
            raise InvalidArgumentError(f"Dependency cycle detected: {cycle}")
        metadata = self.require_metadata(field)
        for dependency in metadata.dependencies:
            self._visit(dependency, ordered, done, path + (field,))
        done.add(field)
        ordered.append(field)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_fields())


def _as_dependency_tuple(dependencies: Sequence[str] | None) -> tuple[str, ...]:
    """Normalize dependency names into a tuple.

    Raises:
        InvalidArgumentError: If a bare string or non-string name is given.
    """
    if dependencies is None:
        return ()
    if isinstance(dependencies, str):
        raise InvalidArgumentError(
            f"Dependencies must be a sequence of names, got the string '{dependencies}'"
        )
    names = tuple(dependencies)
    for name in names:
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Dependency names must be strings, got {name!r}")
    return names


def _build_metadata(spec: FieldSpec, taken: Iterable[str]) -> FieldMetadata:
    """Check one registration spec and build its metadata.

    Args:
        spec: Normalized registration spec.
        taken: Names already registered or staged.

    Returns:
        Metadata ready for insertion.

    Raises:
        InvalidArgumentError: If the name or derived arguments are invalid.
        FieldAlreadyExistsError: If the name is taken.
        DerivedFieldNoDepsError: If a derived field has no dependencies.
    """
    if not isinstance(spec.name, str) or not is_valid_field_name(spec.name):
        raise InvalidArgumentError(f"Invalid field name: {spec.name}")
    if spec.name in taken:
        raise FieldAlreadyExistsError(spec.name)
    if not callable(spec.validator):
        raise InvalidArgumentError(f"Validator for field '{spec.name}' must be callable")
    if spec.is_derived:
        if not spec.dependencies:
            raise DerivedFieldNoDepsError(spec.name)
        if spec.derived_func is None:
            raise InvalidArgumentError("Derived field must have a derived function")
        if not callable(spec.derived_func):
            raise InvalidArgumentError(
                f"Derived function for field '{spec.name}' must be callable"
            )
        return FieldMetadata(
            validator=spec.validator,
            is_derived=True,
            dependencies=spec.dependencies,
            derived_func=spec.derived_func,
        )
    if spec.dependencies or spec.derived_func is not None:
        raise InvalidArgumentError(
            "Non-derived field cannot have dependencies or derived function"
        )
    return FieldMetadata(validator=spec.validator)


def _log_registered(name: str, metadata: FieldMetadata) -> None:
    _LOGGER.info(
        "field_registered",
        field=name,
        is_derived=metadata.is_derived,
        dependencies=list(metadata.dependencies),
    )
