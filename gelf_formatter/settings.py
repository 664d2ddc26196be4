"""Formatter configuration via environment variables."""

from __future__ import annotations

import logging
import os
import socket
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .encoder import GelfEncoder

log = logging.getLogger(__name__)

# hosting environment name, used when GELF_ENVIRONMENT is not set
ENVIRONMENT_FALLBACK_VAR = "APP_ENVIRONMENT"


class Settings(BaseSettings):
    """GELF formatter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GELF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Identifies the emitting application
    facility: str = "app"

    # Empty = resolve from the machine host name
    host: str = ""

    # Sent as _environment; omitted when unset
    environment: str | None = Field(default=None, validate_default=True)

    # Logging
    log_level: str = "INFO"

    @field_validator("environment", mode="before")
    @classmethod
    def default_environment(cls, v: str | None) -> str | None:
        """Fall back to the hosting environment variable, empty means unset."""
        if v is None or v == "":
            v = os.environ.get(ENVIRONMENT_FALLBACK_VAR)
        return v or None

    @field_validator("facility")
    @classmethod
    def validate_facility(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("facility must not be empty")
        return v

    def resolved_host(self) -> str:
        """Configured host, or the machine host name when not configured."""
        if self.host:
            return self.host
        return socket.gethostname()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_encoder(settings: Settings | None = None) -> GelfEncoder:
    """Create an encoder with host and environment resolved once."""
    settings = settings or get_settings()
    host = settings.resolved_host()
    log.debug(
        "gelf_encoder_configured",
        extra={"facility": settings.facility, "gelf_host": host, "gelf_environment": settings.environment},
    )
    return GelfEncoder(facility=settings.facility, host=host, environment=settings.environment)
