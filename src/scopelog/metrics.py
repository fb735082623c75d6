"""Prometheus metrics for log output.

Every record that passes the root logger's level is counted in
``log_messages_total``, labelled by level::

    log_messages_total{level="error"} 3.0

The counter is created once per registry and all level labels start at zero
so dashboards see every series before the first event.
"""

from __future__ import annotations

import logging
import weakref

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    generate_latest,
)

from .errors import MetricsHookError
from .levels import Level

LOG_MESSAGES = "log_messages"

_counters: weakref.WeakKeyDictionary[CollectorRegistry, Counter] = weakref.WeakKeyDictionary()


def log_messages_counter(registry: CollectorRegistry = REGISTRY) -> Counter:
    """Return the log-message counter for ``registry``, registering it once.

    Raises:
        MetricsHookError: If another collector already owns the metric name.
    """
    counter = _counters.get(registry)
    if counter is not None:
        return counter

    try:
        counter = Counter(
            LOG_MESSAGES,
            "Total number of log messages.",
            labelnames=["level"],
            registry=registry,
        )
    except ValueError as exc:
        raise MetricsHookError(f"cannot register {LOG_MESSAGES} counter: {exc}") from exc

    for level in Level:
        counter.labels(level=level.label)
    _counters[registry] = counter
    return counter


class MetricsHook(logging.Handler):
    """Logging handler that counts each record it receives, by level."""

    def __init__(self, counter: Counter) -> None:
        super().__init__()
        self.counter = counter

    @classmethod
    def for_registry(cls, registry: CollectorRegistry = REGISTRY) -> MetricsHook:
        return cls(log_messages_counter(registry))

    def emit(self, record: logging.LogRecord) -> None:
        level = Level.from_levelno(record.levelno)
        self.counter.labels(level=level.label).inc()


def metrics_text(registry: CollectorRegistry = REGISTRY) -> tuple[bytes, str]:
    """Generate Prometheus exposition text and content-type header."""
    return generate_latest(registry), CONTENT_TYPE_LATEST
