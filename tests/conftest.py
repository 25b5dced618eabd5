"""Shared fixtures for schemata tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from schemata.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Settings are cached; reset around every test so env overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Set SCHEMATA_* environment variables for one test."""

    def _apply(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(f"SCHEMATA_{key.upper()}", value)
        get_settings.cache_clear()

    return _apply
