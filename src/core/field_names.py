"""Field naming rules.

Names starting with the reserved prefix belong to the system and are
never registered by callers nor listed as data fields.
"""

from __future__ import annotations

from typing import Iterable

from core.constants import RESERVED_FIELD_PREFIX


def is_system_field(name: str) -> bool:
    """Return whether a name uses the reserved system prefix."""
    return name.startswith(RESERVED_FIELD_PREFIX)


def is_valid_field_name(name: str) -> bool:
    """Check whether a caller-supplied field name may be registered.

    Args:
        name: Candidate field name.

    Returns:
        ``True`` for non-empty names outside the reserved prefix.
    """
    return bool(name) and not is_system_field(name)


def filter_system_fields(names: Iterable[str]) -> list[str]:
    """Drop reserved system names, keeping input order.

    Args:
        names: Field names to filter.

    Returns:
        Data field names only.
    """
    return [name for name in names if not is_system_field(name)]
