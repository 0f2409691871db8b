"""SoAKit exception hierarchy.

This module defines structured domain errors with clear boundaries.
Each failure kind carries its context so callers can render it distinctly.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers for every failure kind."""

    INVALID_ARGUMENT = "invalid_argument"
    FIELD_NOT_FOUND = "field_not_found"
    FIELD_ALREADY_EXISTS = "field_already_exists"
    DERIVED_FIELD_NO_DEPS = "derived_field_no_deps"
    VALIDATION_FAILED = "validation_failed"
    INDEX_OUT_OF_BOUNDS = "index_out_of_bounds"
    LENGTH_MISMATCH = "length_mismatch"
    CONFIG = "config"


class SoAKitError(Exception):
    """Base exception for all SoAKit failures."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def context(self) -> dict[str, object]:
        """Return the structured context fields of this error."""
        return {}

    def to_dict(self) -> dict[str, object]:
        """Render the error as a structured payload.

        Returns:
            Dictionary with ``kind``, ``message`` and context fields.
        """
        return {"kind": self.kind.value, "message": str(self), **self.context()}


class InvalidArgumentError(SoAKitError):
    """Raised for malformed input or inconsistent arguments."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid argument: {message}")
        self.message = message

    def context(self) -> dict[str, object]:
        return {"detail": self.message}


class FieldNotFoundError(SoAKitError):
    """Raised when an operation references an unknown or unset field."""

    kind = ErrorKind.FIELD_NOT_FOUND

    def __init__(self, field: str) -> None:
        super().__init__(f"Field not found: {field}")
        self.field = field

    def context(self) -> dict[str, object]:
        return {"field": self.field}


class FieldAlreadyExistsError(SoAKitError):
    """Raised for duplicate field registration."""

    kind = ErrorKind.FIELD_ALREADY_EXISTS

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' already exists")
        self.field = field

    def context(self) -> dict[str, object]:
        return {"field": self.field}


class DerivedFieldNoDepsError(SoAKitError):
    """Raised when a derived field is registered without dependencies."""

    kind = ErrorKind.DERIVED_FIELD_NO_DEPS

    def __init__(self, field: str) -> None:
        super().__init__(f"Derived field '{field}' has no dependencies")
        self.field = field

    def context(self) -> dict[str, object]:
        return {"field": self.field}


class ValidationFailedError(SoAKitError):
    """Raised when a value fails its field validator."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, field: str, index: int | None = None) -> None:
        location = f" at index {index}" if index is not None else ""
        super().__init__(f"Validation failed: value{location} rejected by field '{field}'")
        self.field = field
        self.index = index

    def context(self) -> dict[str, object]:
        return {"field": self.field, "index": self.index}


class IndexOutOfBoundsError(SoAKitError):
    """Raised for element access beyond container bounds."""

    kind = ErrorKind.INDEX_OUT_OF_BOUNDS

    def __init__(self, index: int, max: int) -> None:  # noqa: A002
        super().__init__(f"Index {index} out of bounds (max: {max})")
        self.index = index
        self.max = max

    def context(self) -> dict[str, object]:
        return {"index": self.index, "max": self.max}


class LengthMismatchError(SoAKitError):
    """Raised when a value or mask count disagrees with the container size."""

    kind = ErrorKind.LENGTH_MISMATCH

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Length mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual

    def context(self) -> dict[str, object]:
        return {"expected": self.expected, "actual": self.actual}


class SoAKitConfigError(SoAKitError):
    """Raised for invalid runtime configuration."""

    kind = ErrorKind.CONFIG
