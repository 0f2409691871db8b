"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
The minimum level comes from the runtime config so library callers
only see SoAKit debug events when they ask for them.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.config import SoAKitConfig

_configured = False


def configure_logging(config: SoAKitConfig) -> None:
    """Configure structlog processors and level filtering.

    Args:
        config: Runtime configuration carrying the log level.
    """
    global _configured
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    No configuration happens here, so modules may bind loggers at import
    time. Logging is configured from the environment on the first log
    call unless ``configure_logging`` ran earlier; an invalid environment
    value raises ``SoAKitConfigError`` from that call.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    return _DeferredLogger(name)


class _DeferredLogger:
    """Logger handle that configures structlog on first method access."""

    def __init__(self, name: str) -> None:
        self._logger = structlog.get_logger(name)

    def __getattr__(self, method: str) -> Any:
        if not _configured:
            configure_logging(SoAKitConfig.from_env())
        return getattr(self._logger, method)
