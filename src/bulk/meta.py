"""Container size and per-field version metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from core.errors import InvalidArgumentError


@dataclass(frozen=True)
class Meta:
    """Immutable container metadata.

    Attributes:
        count: Number of elements, fixed at construction.
        versions: Field name to write counter. A field that was never
            written has no entry.
    """

    count: int
    versions: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))

    @classmethod
    def new(cls, count: int) -> "Meta":
        """Create metadata for ``count`` elements with no fields written.

        Raises:
            InvalidArgumentError: If ``count`` is not a positive integer.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidArgumentError("Bulk count must be greater than 0")
        return cls(count=count)

    @property
    def ids(self) -> range:
        """Element ids ``0..count-1``."""
        return range(self.count)

    def version(self, field_name: str) -> int:
        return self.versions.get(field_name, 0)

    def bump(self, field_names: Iterable[str]) -> "Meta":
        """Return metadata with each named field's version incremented once."""
        versions = dict(self.versions)
        for field_name in field_names:
            versions[field_name] = versions.get(field_name, 0) + 1
        return Meta(count=self.count, versions=versions)
