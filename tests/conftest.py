"""Pytest configuration for scopelog tests."""
import io
import logging
import sys
from pathlib import Path

# Add src/ to path for src-layout imports
_SRC = Path(__file__).parent.parent / 'src'
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import pytest
import structlog
from prometheus_client import CollectorRegistry


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    """Snapshot root-logger and structlog state; restore after each test."""
    import scopelog.logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    monkeypatch.setattr(scopelog.logging, '_installed', None)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def registry():
    """A fresh Prometheus registry per test."""
    return CollectorRegistry()


@pytest.fixture
def stream():
    """In-memory text stream standing in for stderr."""
    return io.StringIO()
