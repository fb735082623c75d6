"""Severity levels.

Values line up with the standard library's numeric levels so a ``Level`` can
be passed straight to ``logging.Logger.setLevel``. ``PANIC`` sits above
``CRITICAL`` and is registered with the logging module on import.
"""

from __future__ import annotations

import logging
from enum import IntEnum

from .errors import InvalidLogLevel


class Level(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL
    PANIC = 60

    @property
    def label(self) -> str:
        """Lowercase name used for parsing and as the metric label."""
        return _LABELS[self]

    @property
    def tag(self) -> str:
        """Four character prefix written at the start of each line."""
        return self.label.upper()[:4]

    @classmethod
    def from_levelno(cls, levelno: int) -> Level:
        """Map a stdlib ``levelno`` onto the closest level at or below it.

        Anything under ``DEBUG`` is reported as ``DEBUG``.
        """
        for level in reversed(cls):
            if levelno >= level:
                return level
        return cls.DEBUG


_LABELS: dict[Level, str] = {
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERROR: "error",
    Level.FATAL: "fatal",
    Level.PANIC: "panic",
}

# Accepted spellings; "warn" and "warning" are both common.
_NAMES: dict[str, Level] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "fatal": Level.FATAL,
    "panic": Level.PANIC,
}

logging.addLevelName(int(Level.PANIC), "PANIC")


def parse_level(value: str) -> Level:
    """Parse a level name, case-insensitively.

    Raises:
        InvalidLogLevel: If ``value`` is not a supported level name.
    """
    try:
        return _NAMES[value.lower()]
    except (KeyError, AttributeError):
        raise InvalidLogLevel(value) from None
