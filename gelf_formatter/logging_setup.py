"""GELF logging setup: stdlib ``logging`` records encoded as GELF JSON lines."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import TextIO

from .encoder import GelfEncoder
from .events import ExceptionInfo, LogEvent, LogLevel, PropertyValue, to_property_value
from .settings import Settings, build_encoder, get_settings

# standard LogRecord attributes, never sent as additional fields
_SKIP = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def level_from_levelno(levelno: int) -> LogLevel:
    """Map a stdlib level number onto the event levels."""
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFORMATION
    if levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.VERBOSE


class GelfFormatter(logging.Formatter):
    """Emit one GELF JSON object per log line."""

    def __init__(self, encoder: GelfEncoder) -> None:
        super().__init__()
        self.encoder = encoder

    def format(self, record: logging.LogRecord) -> str:
        # the handler appends its own terminator
        return self.encoder.encode(self.to_log_event(record)).rstrip("\n")

    def to_log_event(self, record: logging.LogRecord) -> LogEvent:
        properties: dict[str, PropertyValue] = {"logger": to_property_value(record.name)}
        # merge extra fields (skip standard LogRecord attributes)
        for k, v in record.__dict__.items():
            if k not in _SKIP:
                properties[k] = to_property_value(v)

        exception = None
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            exception = ExceptionInfo(
                source=_exception_source(exc),
                message=str(exc),
                stack_trace=self.formatException(record.exc_info),
            )

        return LogEvent(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
            level=level_from_levelno(record.levelno),
            rendered_message=record.getMessage(),
            properties=properties,
            exception=exception,
        )


def _exception_source(exc: BaseException) -> str | None:
    """Module where ``exc`` was raised, from its innermost traceback frame."""
    tb = exc.__traceback__
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return tb.tb_frame.f_globals.get("__name__")


def setup_logging(settings: Settings | None = None, stream: TextIO | None = None) -> GelfFormatter:
    """Configure GELF logging on the root logger."""
    settings = settings or get_settings()
    formatter = GelfFormatter(build_encoder(settings))

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    return formatter
