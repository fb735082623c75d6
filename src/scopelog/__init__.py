"""Process-wide log setup with request-scoped identity fields.

Quick start::

    from scopelog import setup, with_context
    from scopelog.middleware import IdentityContextMiddleware

    setup("info")
    app.add_middleware(IdentityContextMiddleware)

    with_context().info("request handled")
"""

from .context import bind_identity, extract_org_id, log_fields
from .errors import InvalidLogLevel, LoggingSetupError, LogPanic, MetricsHookError
from .levels import Level, parse_level
from .logging import Entry, LoggingConfig, get_logger, setup, with_context
from .metrics import metrics_text

__all__ = [
    "Entry",
    "InvalidLogLevel",
    "Level",
    "LogPanic",
    "LoggingConfig",
    "LoggingSetupError",
    "MetricsHookError",
    "bind_identity",
    "extract_org_id",
    "get_logger",
    "log_fields",
    "metrics_text",
    "parse_level",
    "setup",
    "with_context",
]
