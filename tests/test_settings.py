"""Tests for settings loading and encoder construction."""

import pytest
from pydantic import ValidationError

from gelf_formatter.encoder import GelfEncoder
from gelf_formatter.settings import Settings, build_encoder, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.facility == "app"
        assert s.host == ""
        assert s.environment is None
        assert s.log_level == "INFO"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GELF_FACILITY", "billing")
        monkeypatch.setenv("GELF_HOST", "node-7")
        monkeypatch.setenv("GELF_ENVIRONMENT", "Production")
        s = Settings()
        assert s.facility == "billing"
        assert s.host == "node-7"
        assert s.environment == "Production"

    def test_environment_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENVIRONMENT", "Staging")
        assert Settings().environment == "Staging"

    def test_explicit_environment_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENVIRONMENT", "Staging")
        monkeypatch.setenv("GELF_ENVIRONMENT", "Production")
        assert Settings().environment == "Production"

    def test_empty_environment_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GELF_ENVIRONMENT", "")
        assert Settings().environment is None

    def test_empty_facility_rejected(self) -> None:
        with pytest.raises(ValidationError, match="facility"):
            Settings(facility="  ")

    def test_frozen(self) -> None:
        s = Settings()
        with pytest.raises(ValidationError):
            s.facility = "other"

    def test_resolved_host_configured(self) -> None:
        assert Settings(host="node-7").resolved_host() == "node-7"

    def test_resolved_host_from_machine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("gelf_formatter.settings.socket.gethostname", lambda: "box-1")
        assert Settings().resolved_host() == "box-1"

    def test_get_settings_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GELF_FACILITY", "first")
        first = get_settings()
        monkeypatch.setenv("GELF_FACILITY", "second")
        assert get_settings() is first
        assert get_settings().facility == "first"


class TestBuildEncoder:
    def test_from_settings(self) -> None:
        enc = build_encoder(Settings(facility="svc-a", host="h1", environment="Dev"))
        assert isinstance(enc, GelfEncoder)
        assert enc.facility == "svc-a"
        assert enc.host == "h1"
        assert enc.environment == "Dev"

    def test_from_cached_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GELF_FACILITY", "svc-env")
        monkeypatch.setenv("GELF_HOST", "h-env")
        enc = build_encoder()
        assert enc.facility == "svc-env"
        assert enc.host == "h-env"
        assert enc.environment is None
