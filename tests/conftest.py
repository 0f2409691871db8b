"""Pytest configuration for repository test runs."""

from __future__ import annotations

from collections.abc import Iterator
import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolated_global_registry() -> Iterator[None]:
    """Give every test an empty process-wide registry."""
    from registry.global_registry import reset_registry

    reset_registry()
    yield
    reset_registry()
