"""Memo table for derived-field results.

Each entry records the dependency version vector it was computed from.
Entries are never invalidated eagerly: a reader compares the recorded
vector with the current one and recomputes on mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading

from core.value import Value

VersionVector = tuple[object, ...]


@dataclass(frozen=True)
class CacheEntry:
    """Memoized derived-field result.

    Attributes:
        value: Computed column value.
        versions: Dependency versions at computation time, positional with
            the field's dependency list.
    """

    value: Value
    versions: VersionVector

    def is_valid(self, current_versions: VersionVector) -> bool:
        return self.versions == current_versions


class DerivedCache:
    """Lock-guarded mapping from derived field name to cache entry.

    This is the only mutable state of an otherwise immutable container;
    the lock lets one container snapshot serve concurrent readers.
    """

    def __init__(self, entries: dict[str, CacheEntry] | None = None) -> None:
        self._entries: dict[str, CacheEntry] = dict(entries or {})
        self._lock = threading.Lock()

    def lookup(self, field_name: str, current_versions: VersionVector) -> Value | None:
        """Return the cached value when its versions still match.

        Args:
            field_name: Derived field name.
            current_versions: Current dependency version vector.

        Returns:
            Cached value on hit, ``None`` on miss or stale entry.
        """
        with self._lock:
            entry = self._entries.get(field_name)
        if entry is None or not entry.is_valid(current_versions):
            return None
        return entry.value

    def store(self, field_name: str, value: Value, versions: VersionVector) -> None:
        """Insert or overwrite the entry for a derived field."""
        with self._lock:
            self._entries[field_name] = CacheEntry(value=value, versions=versions)

    def entry(self, field_name: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(field_name)

    def fork(self) -> "DerivedCache":
        """Copy current entries into an independent cache for a new snapshot."""
        with self._lock:
            return DerivedCache(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
