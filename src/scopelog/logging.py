"""Process-wide log configuration.

Sends every record to stderr as one line of text (see ``scopelog.formatter``),
drops records below the configured level, and counts the rest in Prometheus.

Usage::

    from scopelog.logging import setup, with_context

    setup("info")  # Call once at process start
    logger = with_context()
    logger.error("upload failed after %d attempts", 3)
"""

from __future__ import annotations

import logging
import sys
from contextvars import Context
from dataclasses import dataclass
from typing import IO, Any

import structlog
from prometheus_client import REGISTRY, CollectorRegistry

from .config import LoggingSettings
from .context import log_fields
from .errors import LogPanic
from .formatter import build_formatter
from .levels import Level, parse_level
from .metrics import MetricsHook

_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
)


class Entry(structlog.stdlib.BoundLogger):
    """Bound logger with a ``panic`` level on top of the stdlib methods."""

    def panic(self, event: str | None = None, *args: Any, **kw: Any) -> None:
        """Log at PANIC level, then raise :class:`LogPanic`."""
        message = "" if event is None else str(event)
        if args:
            try:
                message = message % args
            except (TypeError, ValueError):
                message = f"{message} {args!r}"
            event = message

        if self._logger.isEnabledFor(int(Level.PANIC)):
            try:
                out_args, out_kw = self._process_event("panic", event, kw)
            except structlog.DropEvent:
                pass
            else:
                self._logger.log(int(Level.PANIC), *out_args, **out_kw)

        raise LogPanic(message)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """What ``setup`` installed on the root logger."""

    level: Level
    handler: logging.Handler
    hook: MetricsHook


_installed: LoggingConfig | None = None


def setup(
    level: str,
    *,
    stream: IO[str] | None = None,
    registry: CollectorRegistry = REGISTRY,
) -> LoggingConfig:
    """Configure process-wide logging. Call once at startup.

    Args:
        level: Minimum level name (debug, info, warn, error, fatal, panic),
            case-insensitive.
        stream: Output stream. Defaults to ``sys.stderr`` at call time.
        registry: Prometheus registry for the log-message counter.

    Raises:
        InvalidLogLevel: ``level`` is not a supported name.
        MetricsHookError: The counter could not be registered.

    Nothing is changed when an error is raised. Calling again replaces the
    handlers installed by the previous call; handlers added by other code
    are kept.
    """
    global _installed

    parsed = parse_level(level)
    hook = MetricsHook.for_registry(registry)

    structlog.configure(
        processors=list(_PROCESSORS),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=Entry,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.terminator = ""
    handler.setFormatter(build_formatter())
    # Loggers with their own level bypass the root level on propagation.
    handler.setLevel(int(parsed))
    hook.setLevel(int(parsed))

    root = logging.getLogger()
    if _installed is not None:
        root.removeHandler(_installed.handler)
        root.removeHandler(_installed.hook)
    root.addHandler(handler)
    root.addHandler(hook)
    root.setLevel(int(parsed))

    _installed = LoggingConfig(level=parsed, handler=handler, hook=hook)
    return _installed


def setup_from_settings(
    settings: LoggingSettings,
    *,
    registry: CollectorRegistry = REGISTRY,
) -> LoggingConfig:
    """Run :func:`setup` with the level from ``settings``."""
    return setup(settings.level, registry=registry)


def with_context(ctx: Context | None = None, name: str | None = None) -> Entry:
    """Return a logger pre-bound with the identity fields found in ``ctx``.

    e.g.::

        logger = with_context()
        logger.error("some error")

    Args:
        ctx: Context to read identity from. Defaults to the current context.
        name: stdlib logger name. Defaults to the root logger.
    """
    return Entry(logging.getLogger(name), list(_PROCESSORS), log_fields(ctx))


def get_logger(name: str | None = None) -> Entry:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
