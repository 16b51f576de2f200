"""Pytest configuration for the fql-client test suite.

Key Principles:
- No network: the HTTP layer is replaced by fakes or patched httpx calls
- Settings are built explicitly per test, never read from the real env
"""

import pytest

from fqlclient.settings import reset_settings


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (may use mocks)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests against a running database"
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep FAUNA_* variables from the developer's shell out of tests."""
    for var in (
        "FAUNA_SECRET",
        "FAUNA_ENDPOINT",
        "FAUNA_TIMEOUT_MS",
        "FAUNA_LINEARIZED",
        "FAUNA_MAX_CONTENTION_RETRIES",
        "FAUNA_QUERY_TAGS",
        "FAUNA_TRACEPARENT",
        "FAUNA_MAX_CONNS",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()
