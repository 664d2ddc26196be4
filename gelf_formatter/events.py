"""Structured log event model: levels, property values and message templates."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Union


class LogLevel(IntEnum):
    """Ordered event severity, lowest first."""

    VERBOSE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5


@dataclass(frozen=True)
class Scalar:
    """A primitive value: str, number, bool, None or an opaque object."""

    value: Any = None


@dataclass(frozen=True)
class Sequence:
    items: tuple[PropertyValue, ...] = ()


@dataclass(frozen=True)
class Structure:
    fields: Mapping[str, PropertyValue] = field(default_factory=dict)


PropertyValue = Union[Scalar, Sequence, Structure]


@dataclass(frozen=True)
class ExceptionInfo:
    source: str | None = None
    message: str | None = None
    stack_trace: str | None = None


@dataclass(frozen=True)
class LogEvent:
    """A single structured log event, already rendered."""

    timestamp: datetime
    level: LogLevel
    rendered_message: str
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    exception: ExceptionInfo | None = None

    @classmethod
    def from_template(
        cls,
        timestamp: datetime,
        level: LogLevel,
        template: str,
        properties: Mapping[str, Any] | None = None,
        exception: ExceptionInfo | None = None,
    ) -> LogEvent:
        """Build an event whose message is ``template`` rendered against ``properties``.

        Plain Python values in ``properties`` are converted with
        :func:`to_property_value`.
        """
        props = {name: to_property_value(v) for name, v in (properties or {}).items()}
        return cls(
            timestamp=timestamp,
            level=level,
            rendered_message=render_template(template, props),
            properties=props,
            exception=exception,
        )


def to_property_value(obj: Any) -> PropertyValue:
    """Convert plain Python data into a PropertyValue tree."""
    if isinstance(obj, (Scalar, Sequence, Structure)):
        return obj
    if isinstance(obj, (str, bytes, bytearray)):
        return Scalar(obj)
    if isinstance(obj, Mapping):
        return Structure({str(k): to_property_value(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple, set, frozenset)):
        return Sequence(tuple(to_property_value(v) for v in obj))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return Structure(
            {f.name: to_property_value(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        )
    return Scalar(obj)


# {{ and }} are escapes; {Name}, {@Name}, {$Name}, {Name,align:format} are holes
_TEMPLATE_TOKEN = re.compile(
    r"\{\{|\}\}|\{([@$]?)([A-Za-z0-9_.]+)(?:,(-?\d+))?(?::([^}]*))?\}"
)


def render_template(template: str, properties: Mapping[str, PropertyValue]) -> str:
    """Render a message template the same way regardless of locale.

    String values are quoted unless the hole uses the ``l`` (literal) format.
    Other format specifiers are Python format specs applied to scalar values,
    e.g. ``{Count:03d}`` or ``{When:%Y-%m-%d}``. A positive alignment pads on
    the left, a negative one on the right. Holes naming an unknown property are
    left as written.
    """

    def _replace(m: re.Match[str]) -> str:
        token = m.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        value = properties.get(m.group(2))
        if value is None:
            return token
        text = render_value(value, m.group(4))
        if m.group(3):
            width = int(m.group(3))
            text = text.rjust(width) if width > 0 else text.ljust(-width)
        return text

    return _TEMPLATE_TOKEN.sub(_replace, template)


def render_value(value: PropertyValue, format_spec: str | None = None) -> str:
    """Textual form of a property value for use inside a message."""
    if isinstance(value, Scalar):
        return _render_scalar(value.value, format_spec)
    if isinstance(value, Sequence):
        return "[" + ", ".join(render_value(v) for v in value.items) + "]"
    if isinstance(value, Structure):
        inner = ", ".join(f"{k}: {render_value(v)}" for k, v in value.fields.items())
        return "{ " + inner + " }"
    return str(value)


def _render_scalar(raw: Any, format_spec: str | None) -> str:
    if raw is None:
        return "null"
    if isinstance(raw, str):
        if format_spec == "l":
            return raw
        return '"' + raw.replace('"', '\\"') + '"'
    if format_spec:
        try:
            return format(raw, format_spec)
        except (TypeError, ValueError):
            pass
    if isinstance(raw, datetime):
        return raw.isoformat()
    return str(raw)
