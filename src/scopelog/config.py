"""Logging settings.

LoggingSettings is a plain dataclass (not env-coupled) so tests can build
one directly; ``from_env`` is the convenience factory for services.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import InvalidLogLevel
from .levels import parse_level


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Configuration accepted by ``setup_from_settings``."""

    level: str = "info"
    """Minimum level name: debug, info, warn, error, fatal or panic."""

    def validate(self) -> list[str]:
        """Return a list of configuration errors. Empty means valid."""
        errors: list[str] = []
        try:
            parse_level(self.level)
        except InvalidLogLevel as exc:
            errors.append(str(exc))
        return errors

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> LoggingSettings:
        """Build settings from ``LOG_LEVEL``, defaulting to ``info``."""
        if env is None:
            env = dict(os.environ)
        return cls(level=env.get("LOG_LEVEL", "info").strip() or "info")
