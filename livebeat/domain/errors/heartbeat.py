"""Heartbeat-related domain errors.

Error taxonomy:
- HeartbeatConfigurationError: raised synchronously when a monitor is
  configured; nothing has been started when it is raised.
- PushFailedError: transport or protocol failure on a push tick. Never
  raised to callers, only handed to the error observer.
- HealthListenerError: the local health listener failed to bind or
  exited unexpectedly. Also observer-only.
"""

from __future__ import annotations

from livebeat.domain.exceptions import LivebeatError


class HeartbeatConfigurationError(LivebeatError, ValueError):
    """Raised when a heartbeat configuration value is invalid.

    Subclasses ValueError so callers validating plain input can keep
    catching ValueError.

    Attributes:
        field: Name of the offending configuration field.
        reason: Why the value was rejected.
    """

    def __init__(self, field: str, reason: str) -> None:
        """Initialize the error.

        Args:
            field: Name of the offending configuration field.
            reason: Why the value was rejected.
        """
        self.field = field
        self.reason = reason
        super().__init__(f"invalid heartbeat configuration: {field} {reason}")


class PushFailedError(LivebeatError):
    """Raised (via the error observer) when a heartbeat push fails.

    Attributes:
        target: The push URL.
        detail: Transport error text, HTTP status, or the negative
            acknowledgement message returned by the remote endpoint.
    """

    def __init__(self, target: str, detail: str) -> None:
        """Initialize the error.

        Args:
            target: The push URL.
            detail: What went wrong.
        """
        self.target = target
        self.detail = detail
        super().__init__(f"push to '{target}' failed: {detail}")


class HealthListenerError(LivebeatError):
    """Raised (via the error observer) when the health listener fails.

    Attributes:
        host: Bind address of the listener.
        port: Bind port of the listener.
        detail: Why the listener failed or stopped.
    """

    def __init__(self, host: str, port: int, detail: str) -> None:
        """Initialize the error.

        Args:
            host: Bind address of the listener.
            port: Bind port of the listener.
            detail: Why the listener failed or stopped.
        """
        self.host = host
        self.port = port
        self.detail = detail
        super().__init__(f"health listener on {host}:{port} failed: {detail}")
