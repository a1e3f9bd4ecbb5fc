"""Time Authority Protocol - interface for consistent timestamp provisioning.

Liveness decisions compare the last report against "now". Services that
need the current time inject a TimeAuthorityProtocol implementation
instead of calling datetime.now() directly, so tests can move time
deterministically with FakeTimeAuthority (tests/helpers).

For production:
    Use SystemTimeAuthority from livebeat.infrastructure.adapters.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.utcnow()  # NOT datetime.now()
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current local time with timezone awareness.

        Returns:
            Current datetime with timezone information (UTC recommended).
        """
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time.

        Returns:
            Current datetime in UTC timezone.
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Returns:
            Monotonically increasing float value (in seconds).

        Note:
            Only differences between values are meaningful.
        """
        ...
