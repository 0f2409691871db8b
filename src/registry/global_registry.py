"""Optional process-wide registry.

Core operations always take a registry explicitly. This module offers a
lazily created shared registry for callers that want one global field
universe, with a lock guarding first access and every mutation.
"""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Iterable, Iterator, Sequence

from registry.field_metadata import DerivedFunc, FieldSpec, Validator
from registry.field_registry import Registry

_LOCK = threading.RLock()
_registry: Registry | None = None


def get_registry() -> Registry:
    """Return the process-wide registry, creating it on first access."""
    global _registry
    with _LOCK:
        if _registry is None:
            _registry = Registry()
        return _registry


@contextmanager
def locked_registry() -> Iterator[Registry]:
    """Hold the registry lock while using the process-wide registry.

    Yields:
        The process-wide registry.
    """
    with _LOCK:
        yield get_registry()


def register_field(
    name: str,
    validator: Validator,
    is_derived: bool = False,
    dependencies: Sequence[str] = (),
    derived_func: DerivedFunc | None = None,
) -> None:
    """Register one field in the process-wide registry.

    Raises:
        InvalidArgumentError: If the name or derived arguments are invalid.
        FieldAlreadyExistsError: If the name is already registered.
        DerivedFieldNoDepsError: If a derived field has no dependencies.
    """
    with locked_registry() as registry:
        registry.register(name, validator, is_derived, dependencies, derived_func)


def register_fields(specs: Iterable[FieldSpec]) -> None:
    """Atomically register a batch of fields in the process-wide registry."""
    with locked_registry() as registry:
        registry.register_all(specs)


def reset_registry() -> None:
    """Drop the process-wide registry so the next access starts empty."""
    global _registry
    with _LOCK:
        _registry = None
