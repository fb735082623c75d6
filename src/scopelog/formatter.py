"""Single-line text rendering for log records.

Every record becomes exactly one line::

    INFO: 2021/03/04 05:06:07.000123 hello a=1 b=x

The level tag is always four characters, the timestamp has microsecond
precision, and each bound field is appended as `` key=value``. There is no
colour and no quoting.

``format_record`` is the pure rendering step. ``TextRenderer`` adapts it to
structlog's processor protocol, and ``build_formatter`` wraps that in a
``ProcessorFormatter`` so stdlib handlers can use it for both structlog
events and plain ``logging`` records.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, MutableMapping, Union

import structlog

from .levels import Level

FieldValue = Union[str, int, float, bool]

# structlog method names that don't match a Level label.
_METHOD_LEVELS: dict[str, Level] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "msg": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "err": Level.ERROR,
    "exception": Level.ERROR,
    "critical": Level.FATAL,
    "fatal": Level.FATAL,
    "panic": Level.PANIC,
}


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One log event, ready to render.

    Attributes:
        level: Severity of the event.
        time: When the event happened.
        message: Message text, written as-is.
        fields: Extra key/value pairs appended after the message.
    """

    level: Level
    time: datetime
    message: str
    fields: Mapping[str, FieldValue] = field(default_factory=dict)


def format_timestamp(time: datetime) -> str:
    """Render ``time`` as ``YYYY/MM/DD HH:MM:SS.ffffff``."""
    return (
        f"{time.year:04d}/{time.month:02d}/{time.day:02d} "
        f"{time.hour:02d}:{time.minute:02d}:{time.second:02d}.{time.microsecond:06d}"
    )


def format_record(record: LogRecord) -> bytes:
    """Render ``record`` as one newline-terminated line of UTF-8."""
    parts = [f"{record.level.tag}: {format_timestamp(record.time)} {record.message}"]
    for key, value in record.fields.items():
        parts.append(f" {key}={value}")
    parts.append("\n")
    return "".join(parts).encode("utf-8")


class TextRenderer:
    """structlog renderer producing the single-line text format.

    Level and time come from the stdlib ``LogRecord`` when the event passed
    through ``ProcessorFormatter``. Otherwise the level is derived from the
    method name and the time is taken at render time.
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> str:
        record: logging.LogRecord | None = event_dict.pop("_record", None)
        event_dict.pop("_from_structlog", None)

        if record is not None:
            level = Level.from_levelno(record.levelno)
            time = datetime.fromtimestamp(record.created)
        else:
            level = _METHOD_LEVELS.get(method_name, Level.INFO)
            time = datetime.now()

        message = event_dict.pop("event", None)
        rendered = format_record(
            LogRecord(
                level=level,
                time=time,
                message="" if message is None else str(message),
                fields=event_dict,
            )
        )
        return rendered.decode("utf-8")


def flatten_exc_info(
    logger: Any,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace ``exc_info`` with a one-line ``error=<Type>: <message>`` field.

    ``stack_info`` is dropped; neither fits on one line.
    """
    exc_info = event_dict.pop("exc_info", None)
    event_dict.pop("stack_info", None)
    if not exc_info:
        return event_dict

    if isinstance(exc_info, BaseException):
        exc = exc_info
    elif isinstance(exc_info, tuple):
        exc = exc_info[1]
    else:
        exc = sys.exc_info()[1]
    if exc is None:
        return event_dict

    text = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    event_dict["error"] = text.replace("\r", "\\r").replace("\n", "\\n")
    return event_dict


def build_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Return the stdlib formatter that renders records with ``TextRenderer``.

    Handlers using it should set ``terminator = ""``; the rendered line
    already ends with a newline.
    """
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            flatten_exc_info,
            TextRenderer(),
        ],
    )
