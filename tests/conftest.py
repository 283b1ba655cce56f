"""Shared fixtures for KeuTrack tests."""

import pytest

from keutrack.audit import DiagnosticLogger, InMemoryDiagnosticSink
from keutrack.config import ApiSettings


@pytest.fixture
def sink():
    """In-memory sink collecting diagnostic events."""
    return InMemoryDiagnosticSink()


@pytest.fixture
def diagnostics(sink):
    """Diagnostic logger writing into the in-memory sink."""
    return DiagnosticLogger(sink=sink, logger_name="keutrack.tests")


@pytest.fixture
def api_settings():
    """API settings with no backoff delay, for fast retry tests."""
    return ApiSettings(
        base_url="http://keutrack.test/api",
        max_retries=3,
        base_delay=0.0,
        max_delay=0.0,
        jitter=0.0,
        timeout=5.0,
    )
