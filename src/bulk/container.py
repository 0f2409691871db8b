"""Immutable structure-of-arrays container.

This module implements the ``Bulk`` container: one column value per
field, a per-field write version, and a memo table of derived-field
results keyed by dependency versions. Every write returns a new
container; unchanged columns are shared by reference between snapshots.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from core.config import SoAKitConfig
from core.errors import (
    FieldNotFoundError,
    InvalidArgumentError,
    LengthMismatchError,
    ValidationFailedError,
)
from core.field_names import filter_system_fields
from core.logging_config import get_logger
from core.value import Value
from bulk.derived_cache import CacheEntry, DerivedCache, VersionVector
from bulk.meta import Meta
from bulk.proxy import Proxy
from bulk.view import View
from registry.field_metadata import FieldMetadata
from registry.field_registry import Registry

_LOGGER = get_logger(__name__)

ApplyFunc = Callable[[list[Value]], Sequence[object]]


class Bulk:
    """Versioned columnar container over a fixed number of elements.

    ``get`` is logically read-only but fills the internal derived-field
    cache; no visible column ever changes after construction.
    """

    def __init__(
        self,
        meta: Meta,
        columns: Mapping[str, Value],
        cache: DerivedCache,
        config: SoAKitConfig,
    ) -> None:
        self._meta = meta
        self._columns = MappingProxyType(dict(columns))
        self._cache = cache
        self._config = config

    @classmethod
    def new(cls, count: int, config: SoAKitConfig | None = None) -> "Bulk":
        """Create an empty container of ``count`` elements.

        Args:
            count: Number of elements, greater than zero.
            config: Optional runtime configuration.

        Returns:
            Container with no fields set.

        Raises:
            InvalidArgumentError: If ``count`` is not positive.
        """
        return cls(
            meta=Meta.new(count),
            columns={},
            cache=DerivedCache(),
            config=config or SoAKitConfig.from_env(),
        )

    @property
    def meta(self) -> Meta:
        return self._meta

    @property
    def columns(self) -> Mapping[str, Value]:
        """Read-only view of stored column values."""
        return self._columns

    def count(self) -> int:
        return self._meta.count

    def __len__(self) -> int:
        return self._meta.count

    def version(self, field: str) -> int:
        """Return the write counter of a field, 0 when never written."""
        return self._meta.version(field)

    def has_column(self, field: str) -> bool:
        return field in self._columns

    def list_data_fields(self) -> list[str]:
        """Return stored field names excluding system fields, sorted."""
        return sorted(filter_system_fields(self._columns))

    def cache_entry(self, field: str) -> CacheEntry | None:
        """Return the memoized entry of a derived field, if any."""
        return self._cache.entry(field)

    def set(self, registry: Registry, field: str, values: Sequence[object]) -> "Bulk":
        """Replace one stored field with new per-element values.

        Args:
            registry: Registry describing the field.
            field: Registered, non-derived field name.
            values: One value per element; plain Python values are
                converted with ``Value.from_python``.

        Returns:
            New container with the field written and its version bumped.

        Raises:
            FieldNotFoundError: If the field is not registered.
            InvalidArgumentError: If the field is derived or values mix kinds.
            LengthMismatchError: If the value count differs from ``count``.
            ValidationFailedError: If any value fails the field validator.
        """
        metadata = registry.require_metadata(field)
        if metadata.is_derived:
            raise InvalidArgumentError(
                f"Field '{field}' is derived and cannot be set directly"
            )
        elements = _coerce_values(values)
        if len(elements) != self._meta.count:
            raise LengthMismatchError(expected=self._meta.count, actual=len(elements))
        for index, element in enumerate(elements):
            if not registry.validate(field, element):
                raise ValidationFailedError(field, index)
        column = Value.from_scalars(elements)
        updated = self._replace_columns({field: column})
        _LOGGER.debug(
            "field_set",
            field=field,
            count=self._meta.count,
            version=updated.version(field),
        )
        return updated

    def get(self, registry: Registry, field: str) -> Value:
        """Read a stored or derived field as one column value.

        Derived fields are served from the cache while every dependency
        version still matches the recorded vector; otherwise their
        dependencies are read recursively and the derived function reruns.

        Args:
            registry: Registry describing the field.
            field: Registered field name.

        Returns:
            Column value for the field.

        Raises:
            FieldNotFoundError: If the field is unregistered, or a stored
                field was never set.
            InvalidArgumentError: If a derived result fails validation or
                the dependency graph has a cycle.
        """
        return self._get(registry, field, ())

    def at(self, idx: int) -> Proxy:
        """Return a single-element handle sharing this container.

        Raises:
            IndexOutOfBoundsError: If ``idx`` is outside ``0..count-1``.
        """
        return Proxy(self, idx)

    def apply(
        self,
        mask: Sequence[bool],
        func: ApplyFunc,
        fields: Iterable[str] | None = None,
        registry: Registry | None = None,
    ) -> "Bulk":
        """Transform masked elements of stored fields.

        ``func`` runs once per field with the selected elements in
        ascending index order and must return one value per selected
        element. Results replace the selected positions; unselected
        positions keep their values. Only fields whose data changed get a
        version bump. Either every field is transformed or the call fails
        and no container is produced.

        Args:
            mask: Inclusion mask; empty selects every element.
            func: Transform over the selected elements.
            fields: Stored fields to transform; all data fields when omitted.
            registry: Optional registry used to re-validate new values.

        Returns:
            New container with transformed fields.

        Raises:
            LengthMismatchError: If the mask or a ``func`` result has the
                wrong length.
            FieldNotFoundError: If a named field is not stored.
            InvalidArgumentError: If ``fields`` is a bare string, a named
                field is derived, or results mix kinds.
            ValidationFailedError: If a new value fails its validator.
        """
        selected = self._selected_indices(mask)
        target_fields = self._resolve_apply_fields(fields, registry)
        changed: dict[str, Value] = {}
        for field in target_fields:
            column = self._columns[field]
            new_column = _transform_column(field, column, selected, func, registry)
            if new_column != column:
                changed[field] = new_column
        updated = self._replace_columns(changed)
        _LOGGER.debug(
            "bulk_applied",
            fields=target_fields,
            changed_fields=sorted(changed),
            selected=len(selected),
        )
        return updated

    def partition_by(self, registry: Registry, field: str) -> list[View]:
        """Split the container into views, one per distinct field value.

        Keys follow first-occurrence order and compare by value, with all
        NaN floats grouped together.

        Args:
            registry: Registry describing the field.
            field: Field whose column is a vector.

        Returns:
            Views in first-occurrence order of their keys.

        Raises:
            FieldNotFoundError: If the field is unregistered or unset.
            InvalidArgumentError: If the column is not a vector.
        """
        column = self.get(registry, field)
        if not column.is_vector:
            raise InvalidArgumentError("Partition field must be a vector")
        groups: dict[tuple[str, object], tuple[Value, list[bool]]] = {}
        for index, element in enumerate(column.elements()):
            key = element.partition_key()
            if key not in groups:
                groups[key] = (element, [False] * self._meta.count)
            groups[key][1][index] = True
        views = [View(key_value, mask, self) for key_value, mask in groups.values()]
        _LOGGER.debug("bulk_partitioned", field=field, partitions=len(views))
        return views

    def _get(self, registry: Registry, field: str, path: tuple[str, ...]) -> Value:
        if field in path:
            cycle = " -> ".join(path + (field,))
            raise InvalidArgumentError(f"Dependency cycle detected: {cycle}")
        metadata = registry.require_metadata(field)
        if not metadata.is_derived:
            column = self._columns.get(field)
            if column is None:
                raise FieldNotFoundError(field)
            return column
        return self._get_derived(registry, field, metadata, path + (field,))

    def _get_derived(
        self,
        registry: Registry,
        field: str,
        metadata: FieldMetadata,
        path: tuple[str, ...],
    ) -> Value:
        versions = self._dependency_versions(registry, metadata, path)
        if self._config.cache_derived:
            cached = self._cache.lookup(field, versions)
            if cached is not None:
                _LOGGER.debug("derived_cache_hit", field=field)
                return cached
        arguments = [self._get(registry, dependency, path) for dependency in metadata.dependencies]
        derived_func = metadata.derived_func
        if derived_func is None:
            raise InvalidArgumentError("Derived field missing function")
        computed = derived_func(arguments)
        if not isinstance(computed, Value):
            raise InvalidArgumentError(
                f"Derived field '{field}' returned {type(computed).__name__}, expected Value"
            )
        if not metadata.validator(computed):
            raise InvalidArgumentError(f"Computed value for derived field '{field}' failed validation")
        if self._config.cache_derived:
            self._cache.store(field, computed, versions)
        _LOGGER.debug("derived_recomputed", field=field, versions=repr(versions))
        return computed

    def _dependency_versions(
        self,
        registry: Registry,
        metadata: FieldMetadata,
        path: tuple[str, ...],
    ) -> VersionVector:
        """Build the version vector of a derived field's dependencies.

        A stored dependency contributes its write counter. A derived
        dependency contributes its own dependency vector, so a write
        anywhere below a chain of derived fields changes every vector above.

        Raises:
            FieldNotFoundError: If a dependency is unregistered.
            InvalidArgumentError: If the dependency graph has a cycle.
        """
        versions: list[object] = []
        for dependency in metadata.dependencies:
            if dependency in path:
                cycle = " -> ".join(path + (dependency,))
                raise InvalidArgumentError(f"Dependency cycle detected: {cycle}")
            dependency_metadata = registry.require_metadata(dependency)
            if dependency_metadata.is_derived:
                versions.append(
                    self._dependency_versions(
                        registry, dependency_metadata, path + (dependency,)
                    )
                )
            else:
                versions.append(self._meta.version(dependency))
        return tuple(versions)

    def _selected_indices(self, mask: Sequence[bool]) -> list[int]:
        if not mask:
            return list(self._meta.ids)
        if len(mask) != self._meta.count:
            raise LengthMismatchError(expected=self._meta.count, actual=len(mask))
        return [index for index, included in enumerate(mask) if included]

    def _resolve_apply_fields(
        self,
        fields: Iterable[str] | None,
        registry: Registry | None,
    ) -> list[str]:
        if fields is None:
            return self.list_data_fields()
        if isinstance(fields, str):
            raise InvalidArgumentError(
                f"Fields must be a sequence of names, got the string '{fields}'"
            )
        resolved: list[str] = []
        for field in fields:
            if registry is not None:
                metadata = registry.require_metadata(field)
                if metadata.is_derived:
                    raise InvalidArgumentError(
                        f"Field '{field}' is derived and cannot be transformed"
                    )
            if field not in self._columns:
                raise FieldNotFoundError(field)
            if field not in resolved:
                resolved.append(field)
        return resolved

    def _replace_columns(self, changed: Mapping[str, Value]) -> "Bulk":
        """Build a new snapshot with changed columns and bumped versions."""
        columns = dict(self._columns)
        columns.update(changed)
        return Bulk(
            meta=self._meta.bump(changed),
            columns=columns,
            cache=self._cache.fork(),
            config=self._config,
        )


def _coerce_values(values: Sequence[object]) -> list[Value]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise InvalidArgumentError("Values must be a sequence with one entry per element")
    return [Value.from_python(value) for value in values]


def _transform_column(
    field: str,
    column: Value,
    selected: list[int],
    func: ApplyFunc,
    registry: Registry | None,
) -> Value:
    """Run the transform over one column and splice results back.

    Raises:
        LengthMismatchError: If ``func`` returns the wrong number of values.
        ValidationFailedError: If a new value fails the field validator.
    """
    elements = list(column.elements())
    subset = [elements[index] for index in selected]
    results = _coerce_values(list(func(subset)))
    if len(results) != len(selected):
        raise LengthMismatchError(expected=len(selected), actual=len(results))
    for index, result in zip(selected, results):
        if registry is not None and not registry.validate(field, result):
            raise ValidationFailedError(field, index)
        elements[index] = result
    return Value.from_scalars(elements)

