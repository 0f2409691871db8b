"""Runtime configuration model for SoAKit.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_CACHE_DERIVED,
    DEFAULT_LOG_LEVEL,
    FALSE_ENV_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUE_ENV_VALUES,
)
from core.errors import SoAKitConfigError


@dataclass(frozen=True)
class SoAKitConfig:
    """Validated runtime configuration.

    Attributes:
        log_level: Minimum level emitted by SoAKit loggers.
        cache_derived: Whether derived-field results are memoized.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    cache_derived: bool = DEFAULT_CACHE_DERIVED

    @classmethod
    def from_env(cls) -> "SoAKitConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SoAKitConfigError: If environment values are invalid.
        """
        log_level = _parse_log_level(os.getenv("SOAKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        cache_derived = _parse_bool(
            "SOAKIT_CACHE_DERIVED",
            os.getenv("SOAKIT_CACHE_DERIVED", str(DEFAULT_CACHE_DERIVED)),
        )
        return cls(log_level=log_level, cache_derived=cache_derived)


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-cased supported level name.

    Raises:
        SoAKitConfigError: If the level is not supported.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise SoAKitConfigError(
            "Invalid SOAKIT_LOG_LEVEL value: "
            f"expected one of {', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'. "
            "Set SOAKIT_LOG_LEVEL to a supported level name."
        )
    return level


def _parse_bool(env_name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise SoAKitConfigError(
        f"Invalid {env_name} value: expected a boolean flag, got '{raw_value}'. "
        f"Use one of {', '.join(TRUE_ENV_VALUES + FALSE_ENV_VALUES)}."
    )
