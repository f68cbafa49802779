"""
Test Configuration and Fixtures

Shared fixtures for the bootstrap test suite.
"""

import os
from pathlib import Path
from typing import Callable

import pytest

from backend_bootstrap.config import get_settings


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (may use real services)")


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings and any BOOTSTRAP_* variables from the environment."""
    for name in list(os.environ):
        if name.startswith("BOOTSTRAP_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_config(tmp_path) -> Callable[..., Path]:
    """Write a configuration file under ``tmp_path/config`` and return its path."""

    def _write(content: str, filename: str = "config.yaml", directory: str = "config") -> Path:
        target_dir = tmp_path / directory
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def backend_config_text() -> str:
    """A configuration that works without any external service."""
    return (
        "database:\n"
        "  dsn: \"sqlite://\"\n"
        "redis:\n"
        "  addr: \"localhost:6379\"\n"
        "  password: \"\"\n"
        "  db: 0\n"
        "rabbitmq:\n"
        "  url: \"memory://\"\n"
    )
