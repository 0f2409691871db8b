"""Public SDK surface for SoAKit.

This module provides a stable import path for library users.
It re-exports the container, registry, value model, and structured errors.
"""

from __future__ import annotations

from bulk.container import Bulk
from bulk.derived_cache import CacheEntry
from bulk.meta import Meta
from bulk.proxy import Proxy
from bulk.view import View
from core.config import SoAKitConfig
from core.errors import (
    DerivedFieldNoDepsError,
    ErrorKind,
    FieldAlreadyExistsError,
    FieldNotFoundError,
    IndexOutOfBoundsError,
    InvalidArgumentError,
    LengthMismatchError,
    SoAKitConfigError,
    SoAKitError,
    ValidationFailedError,
)
from core.value import Value, ValueKind
from registry.field_metadata import FieldMetadata, FieldSpec
from registry.field_registry import Registry
from registry.global_registry import get_registry, register_field, register_fields, reset_registry
from store.arrow_table import bulk_from_arrow_table, bulk_to_arrow_table
from store.record_payload import (
    bulk_from_records,
    bulk_to_records,
    records_from_json,
    records_to_json,
)


def init(count: int, config: SoAKitConfig | None = None) -> Bulk:
    """Create an empty container of ``count`` elements.

    Raises:
        InvalidArgumentError: If ``count`` is not positive.
    """
    return Bulk.new(count, config)


__all__ = [
    "Bulk",
    "CacheEntry",
    "DerivedFieldNoDepsError",
    "ErrorKind",
    "FieldAlreadyExistsError",
    "FieldMetadata",
    "FieldNotFoundError",
    "FieldSpec",
    "IndexOutOfBoundsError",
    "InvalidArgumentError",
    "LengthMismatchError",
    "Meta",
    "Proxy",
    "Registry",
    "SoAKitConfig",
    "SoAKitConfigError",
    "SoAKitError",
    "ValidationFailedError",
    "Value",
    "ValueKind",
    "View",
    "bulk_from_arrow_table",
    "bulk_from_records",
    "bulk_to_arrow_table",
    "bulk_to_records",
    "get_registry",
    "init",
    "records_from_json",
    "records_to_json",
    "register_field",
    "register_fields",
    "reset_registry",
]
