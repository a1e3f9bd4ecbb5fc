"""
Pytest configuration and shared fixtures for livebeat tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Time-dependent tests use FakeTimeAuthority, not sleeps
- Outbound pushes use httpx.MockTransport; no real remote endpoints
- Unit tests go in tests/unit/
- Integration tests (real sockets) go in tests/integration/
"""

import pytest

from tests.helpers import ErrorRecorder, FakeTimeAuthority


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from livebeat import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Provide a frozen clock at 2026-01-01T00:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture
def error_recorder() -> ErrorRecorder:
    """Provide a thread-safe error observer."""
    return ErrorRecorder()
