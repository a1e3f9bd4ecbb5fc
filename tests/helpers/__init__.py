"""Test helpers for livebeat tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    ErrorRecorder: Thread-safe error observer for asserting callbacks

Usage:
    from tests.helpers import ErrorRecorder, FakeTimeAuthority
"""

from tests.helpers.error_recorder import ErrorRecorder
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["ErrorRecorder", "FakeTimeAuthority"]
