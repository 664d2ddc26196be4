"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from gelf_formatter.encoder import GelfEncoder
from gelf_formatter.events import LogEvent, LogLevel
from gelf_formatter.settings import ENVIRONMENT_FALLBACK_VAR, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from GELF_* variables of the host and from cached settings."""
    for var in ("GELF_FACILITY", "GELF_HOST", "GELF_ENVIRONMENT", "GELF_LOG_LEVEL", ENVIRONMENT_FALLBACK_VAR):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def timestamp() -> datetime:
    return datetime(2024, 1, 15, 14, 30, 22, 250000, tzinfo=timezone.utc)


@pytest.fixture
def encoder() -> GelfEncoder:
    return GelfEncoder(facility="svc-a", host="h1")


@pytest.fixture
def make_event(timestamp: datetime):
    """Factory for events with sensible defaults."""

    def _make(**kwargs) -> LogEvent:
        defaults = dict(
            timestamp=timestamp,
            level=LogLevel.INFORMATION,
            rendered_message="boot ok",
        )
        defaults.update(kwargs)
        return LogEvent(**defaults)

    return _make
