"""
Pytest fixtures for the records test suite.

Provides:
- Structured logging configured for the whole session
- Isolation of LogContext and the descriptor cache between tests
- A captured_logs fixture returning parsed JSON log lines
"""

import json
import logging
from io import StringIO

import pytest

from records_codec.introspector import clear_descriptor_cache
from records_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _clear_descriptors():
    clear_descriptor_cache()
    yield
    clear_descriptor_cache()


@pytest.fixture
def captured_logs():
    """
    Capture records logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            marshal(entries)
            logs = captured_logs()
            assert any(r["message"] == "marshal_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("records")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)
