"""Typed field metadata models.

This module defines the immutable per-field metadata held by a registry
and the registration spec tuple used for bulk registration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from core.value import Value

Validator = Callable[[Value], bool]
DerivedFunc = Callable[[Sequence[Value]], Value]


@dataclass(frozen=True)
class FieldMetadata:
    """Immutable metadata for one registered field.

    Attributes:
        validator: Predicate over a single value. Stored fields call it once
            per element at ``set`` time; derived fields call it once on the
            whole computed column.
        is_derived: Whether the field is computed from other fields.
        dependencies: Ordered dependency names for derived fields.
        derived_func: Computation receiving one column value per dependency,
            in dependency order.
    """

    validator: Validator
    is_derived: bool = False
    dependencies: tuple[str, ...] = ()
    derived_func: DerivedFunc | None = None


@dataclass(frozen=True)
class FieldSpec:
    """Registration request for one field.

    Attributes:
        name: Field name.
        validator: Field validator predicate.
        is_derived: Whether the field is derived.
        dependencies: Ordered dependency names for derived fields.
        derived_func: Derived computation function.
    """

    name: str
    validator: Validator
    is_derived: bool = False
    dependencies: tuple[str, ...] = ()
    derived_func: DerivedFunc | None = None
