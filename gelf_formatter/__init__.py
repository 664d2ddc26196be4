"""Encode structured log events as GELF JSON lines."""

from .encoder import GelfEncoder, UnsupportedSeverity, encode, normalize_value, severity_level
from .events import (
    ExceptionInfo,
    LogEvent,
    LogLevel,
    PropertyValue,
    Scalar,
    Sequence,
    Structure,
    render_template,
    to_property_value,
)
from .logging_setup import GelfFormatter, setup_logging
from .settings import Settings, build_encoder, get_settings

__version__ = "1.0.0"

__all__ = [
    "ExceptionInfo",
    "GelfEncoder",
    "GelfFormatter",
    "LogEvent",
    "LogLevel",
    "PropertyValue",
    "Scalar",
    "Sequence",
    "Settings",
    "Structure",
    "UnsupportedSeverity",
    "build_encoder",
    "encode",
    "get_settings",
    "normalize_value",
    "render_template",
    "setup_logging",
    "severity_level",
    "to_property_value",
]
