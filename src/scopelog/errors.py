"""Error hierarchy for scopelog.

Kept small and dependency-free so callers can catch setup failures without
importing structlog or prometheus_client.
"""

from __future__ import annotations


class LoggingSetupError(Exception):
    """Base class for failures while configuring process-wide logging."""


class InvalidLogLevel(LoggingSetupError):
    """Raised when a level name is not one of the supported levels."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid log level: {value!r}")


class MetricsHookError(LoggingSetupError):
    """Raised when the log-message counter cannot be registered."""


class MissingOrgID(LookupError):
    """Raised when no org ID is bound in the request context."""


class LogPanic(Exception):
    """Raised by ``Entry.panic()`` after the record has been written."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
