"""ErrorObserver port - callback for runtime heartbeat errors.

Push and listener failures happen on background tasks long after
start() has returned, so they cannot be raised to the caller. They are
handed to an optional observer instead. The observer is always invoked
off the task that produced the error, so a slow observer never delays
the next push tick.

An absent observer is a no-op, not an error.
"""

from __future__ import annotations

from typing import Protocol


class ErrorObserver(Protocol):
    """Callable receiving one runtime error per failure."""

    def __call__(self, error: Exception) -> None:
        """Handle a push or listener error.

        Args:
            error: A PushFailedError or HealthListenerError.
        """
        ...
