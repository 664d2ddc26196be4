"""GELF encoder: turn a LogEvent into a single JSON line.

Additional fields follow the GELF rules:
- every custom key is prefixed with ``_``;
- ``id`` (any case) is sent as ``_id_`` since servers drop ``_id``;
- null values are never emitted.
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime, time, timezone
from typing import Any, TextIO

from .events import LogEvent, LogLevel, PropertyValue, Scalar, Sequence, Structure

GELF_VERSION = "1.0"

# Syslog severities; VERBOSE shares the debug value since syslog has no lower level
_SEVERITY: dict[LogLevel, int] = {
    LogLevel.VERBOSE: 7,
    LogLevel.DEBUG: 7,
    LogLevel.INFORMATION: 6,
    LogLevel.WARNING: 4,
    LogLevel.ERROR: 3,
    LogLevel.FATAL: 2,
}

_NON_FINITE = {math.inf: "Infinity", -math.inf: "-Infinity"}


class UnsupportedSeverity(ValueError):
    """Raised for an event level outside the known LogLevel values."""

    def __init__(self, level: Any) -> None:
        super().__init__(f"Unsupported log level: {level!r}")
        self.level = level


def severity_level(level: LogLevel) -> int:
    """Map an event level to its syslog severity."""
    # plain ints compare equal to IntEnum members and must not pass
    if not isinstance(level, LogLevel):
        raise UnsupportedSeverity(level)
    try:
        return _SEVERITY[level]
    except (KeyError, TypeError):
        raise UnsupportedSeverity(level) from None


def normalize_value(value: Any) -> Any:
    """Reduce a PropertyValue to plain JSON-ready data, dropping null leaves."""
    if isinstance(value, Scalar):
        return _normalize_scalar(value.value)
    if isinstance(value, Sequence):
        items = []
        for item in value.items:
            parsed = normalize_value(item)
            if parsed is not None:
                items.append(parsed)
        return items
    if isinstance(value, Structure):
        fields: dict[str, Any] = {}
        for name, item in value.fields.items():
            parsed = normalize_value(item)
            if parsed is not None:
                fields[name] = parsed
        return fields
    return _text(value)


def _text(obj: Any) -> str:
    """str() of an arbitrary object, degrading to the default repr if it fails."""
    try:
        return str(obj)
    except Exception:
        return object.__repr__(obj)


def _normalize_scalar(raw: Any) -> Any:
    if raw is None or isinstance(raw, (str, bool, int)):
        return raw
    if isinstance(raw, float):
        if math.isnan(raw):
            return "NaN"
        return _NON_FINITE.get(raw, raw)
    if isinstance(raw, (datetime, date, time)):
        return raw.isoformat()
    return _text(raw)


def sanitize_key(key: str) -> str:
    """Apply the GELF additional-field naming rules to ``key``."""
    if key.lower() == "id":
        key = "id_"
    if not key.startswith("_"):
        key = "_" + key
    if key.lower() == "_id":
        key += "_"
    return key


def add_additional_field(document: dict[str, Any], key: str | None, value: Any) -> None:
    """Insert an already normalized value, skipping empty keys and nulls."""
    if not key or value is None:
        return
    document[sanitize_key(key)] = value


def unix_timestamp(moment: datetime) -> float:
    """Seconds since 1970-01-01T00:00:00Z, fractional part kept.

    A naive ``moment`` is taken as UTC.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


class GelfEncoder:
    """Encode log events as GELF JSON lines.

    Holds only immutable configuration, so one instance can be shared
    across threads.
    """

    def __init__(self, facility: str, host: str, environment: str | None = None) -> None:
        self._facility = facility
        self._host = host
        self._environment = environment

    @property
    def facility(self) -> str:
        return self._facility

    @property
    def host(self) -> str:
        return self._host

    @property
    def environment(self) -> str | None:
        return self._environment

    def build_document(self, event: LogEvent) -> dict[str, Any]:
        """Build the GELF document for ``event`` without serializing it."""
        document: dict[str, Any] = {
            "formatterVersion": GELF_VERSION,
            "host": self._host,
            "level": severity_level(event.level),
            "facility": self._facility,
            "message": event.rendered_message,
            "_timestamp": unix_timestamp(event.timestamp),
        }
        if self._environment is not None:
            document["_environment"] = self._environment

        for name, value in event.properties.items():
            add_additional_field(document, name, normalize_value(value))

        if event.exception is not None:
            add_additional_field(document, "ExceptionSource", event.exception.source)
            add_additional_field(document, "ExceptionMessage", event.exception.message)
            add_additional_field(document, "StackTrace", event.exception.stack_trace)

        return document

    def encode(self, event: LogEvent) -> str:
        """Return ``event`` as one compact JSON line ending in a newline."""
        document = self.build_document(event)
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False) + "\n"

    def write(self, event: LogEvent, output: TextIO) -> None:
        """Write the encoded line for ``event`` to ``output``."""
        output.write(self.encode(event))


def encode(
    event: LogEvent,
    facility: str,
    host: str,
    environment_tag: str | None = None,
) -> str:
    """Encode a single event without keeping an encoder around."""
    return GelfEncoder(facility, host, environment_tag).encode(event)
