"""Liveness state shared by the push sender and health listener.

LivenessState is the only shared mutable resource in a heartbeat monitor.
It records the most recent time the monitored subject reported itself
alive and answers whether that report is still fresh.

Invariants:
- last_alive only ever advances; an older report is discarded, so
  concurrent reports resolve to the highest timestamp regardless of
  arrival order.
- The alive predicate is recomputed against the clock on every read.
- Every read and write takes the same lock, and the lock is never held
  across I/O.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

UNIX_EPOCH: datetime = datetime.fromtimestamp(0, tz=timezone.utc)
"""Initial last_alive value; a fresh state is not alive until a report."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(at: datetime) -> datetime:
    if at.tzinfo is None:
        return at.replace(tzinfo=timezone.utc)
    return at


class LivenessState:
    """Mutex-guarded record of the last time the subject was alive.

    Attributes:
        liveness_threshold: Maximum age of the last report before the
            subject is considered not alive. Immutable.

    Example:
        >>> state = LivenessState(timedelta(seconds=60))
        >>> state.is_alive()
        False
        >>> state.report(datetime.now(timezone.utc))
        >>> state.is_alive()
        True
    """

    def __init__(
        self,
        liveness_threshold: timedelta,
        *,
        clock: Callable[[], datetime] | None = None,
        lock: threading.Lock | None = None,
    ) -> None:
        """Initialize the state in the not-alive position.

        Args:
            liveness_threshold: Freshness window for the last report.
            clock: Returns the current time. Defaults to UTC wall clock.
            lock: Lock to guard the state. Pass a shared lock when other
                flags must be serialized with the timestamp.
        """
        self._liveness_threshold = liveness_threshold
        self._clock = clock or _utcnow
        self._lock = lock or threading.Lock()
        self._last_alive: datetime = UNIX_EPOCH

    @property
    def liveness_threshold(self) -> timedelta:
        """Get the freshness window."""
        return self._liveness_threshold

    @property
    def last_alive(self) -> datetime:
        """Get the most recent accepted report (read under the lock)."""
        with self._lock:
            return self._last_alive

    def report(self, at: datetime) -> None:
        """Record that the subject was alive at the given time.

        Reports older than the current value are ignored. Naive
        datetimes are interpreted as UTC.

        Args:
            at: When the subject was last known to be functioning.
        """
        at = _as_aware(at)
        with self._lock:
            if self._last_alive < at:
                self._last_alive = at

    def is_alive(self) -> bool:
        """Check whether the last report is younger than the threshold.

        Returns:
            True if now - last_alive < liveness_threshold.
        """
        with self._lock:
            now = _as_aware(self._clock())
            return now - self._last_alive < self._liveness_threshold
