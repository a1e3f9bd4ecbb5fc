"""Heartbeat monitor configuration.

This module defines the configuration for a heartbeat monitor, validated
once at construction and immutable afterwards, with environment variable
overrides for deployment.

Constraints:
- heartbeat_interval_seconds and liveness_threshold_seconds are positive
  finite numbers
- http_timeout_seconds, if set, is positive, finite, and below the interval
- port is within [0, 65535]; 0 or None disables the health listener
- at least one of push_url and port is configured; both may be

Environment Variables:
- HEARTBEAT_INTERVAL_SECONDS: Spacing between push attempts (default: 60)
- HEARTBEAT_LIVENESS_THRESHOLD_SECONDS: Freshness window (default: 120)
- HEARTBEAT_PUSH_URL: Remote push URL (default: unset)
- HEARTBEAT_PORT: Local health listener port (default: unset)
- HEARTBEAT_HTTP_TIMEOUT_SECONDS: Push request timeout (default: derived)
- HEARTBEAT_HOST: Health listener bind address (default: 0.0.0.0)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field

from livebeat.application.ports.error_observer import ErrorObserver
from livebeat.domain.errors.heartbeat import HeartbeatConfigurationError

MAX_PORT = 65535
MIN_HTTP_TIMEOUT_SECONDS = 1.0
"""Floor for the derived push timeout; also the amount subtracted from the interval."""


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _get_optional_float_env(key: str) -> float | None:
    value = os.environ.get(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _get_optional_int_env(key: str) -> int | None:
    value = os.environ.get(key)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class HeartbeatConfig:
    """Configuration for a heartbeat monitor.

    Attributes:
        heartbeat_interval_seconds: Spacing between push attempts.
        liveness_threshold_seconds: Maximum age of the last liveness report
            before pushes stop and the health endpoint reports 503.
        push_url: URL to GET on every tick while alive. Redirects are
            followed; the final response must be 2xx. None or empty
            disables pushing.
        port: Port for the local health listener. None or 0 disables it.
        http_timeout_seconds: Timeout for each push request. Defaults to
            max(heartbeat_interval_seconds - 1, 1).
        host: Bind address for the health listener.
        on_error: Optional observer for push and listener errors.
    """

    heartbeat_interval_seconds: float
    liveness_threshold_seconds: float
    push_url: str | None = None
    port: int | None = None
    http_timeout_seconds: float | None = None
    host: str = "0.0.0.0"
    on_error: ErrorObserver | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not _is_positive(self.liveness_threshold_seconds):
            raise HeartbeatConfigurationError(
                "liveness_threshold_seconds",
                "must be a positive finite number, "
                f"got {self.liveness_threshold_seconds}",
            )
        if not _is_positive(self.heartbeat_interval_seconds):
            raise HeartbeatConfigurationError(
                "heartbeat_interval_seconds",
                "must be a positive finite number, "
                f"got {self.heartbeat_interval_seconds}",
            )
        if self.http_timeout_seconds is not None:
            if not _is_positive(self.http_timeout_seconds):
                raise HeartbeatConfigurationError(
                    "http_timeout_seconds",
                    "must be a positive finite number, "
                    f"got {self.http_timeout_seconds}",
                )
            if self.http_timeout_seconds >= self.heartbeat_interval_seconds:
                raise HeartbeatConfigurationError(
                    "http_timeout_seconds",
                    f"({self.http_timeout_seconds}) must be less than "
                    f"heartbeat_interval_seconds ({self.heartbeat_interval_seconds})",
                )
        if self.port is not None and not 0 <= self.port <= MAX_PORT:
            raise HeartbeatConfigurationError(
                "port", f"must be in the range [0, {MAX_PORT}], got {self.port}"
            )
        if not self.push_enabled and not self.server_enabled:
            raise HeartbeatConfigurationError(
                "push_url", "or port must be set; nothing to do otherwise"
            )

    @property
    def push_enabled(self) -> bool:
        """Check whether pushes to a remote URL are configured."""
        return bool(self.push_url)

    @property
    def server_enabled(self) -> bool:
        """Check whether the local health listener is configured."""
        return bool(self.port)

    @property
    def effective_http_timeout_seconds(self) -> float:
        """Get the push request timeout, deriving it when unset."""
        if self.http_timeout_seconds is not None:
            return self.http_timeout_seconds
        return max(
            self.heartbeat_interval_seconds - MIN_HTTP_TIMEOUT_SECONDS,
            MIN_HTTP_TIMEOUT_SECONDS,
        )

    @classmethod
    def from_environment(
        cls, on_error: ErrorObserver | None = None
    ) -> "HeartbeatConfig":
        """Create config from environment variables with defaults.

        Args:
            on_error: Optional observer for push and listener errors.

        Returns:
            HeartbeatConfig with values from environment or defaults.

        Raises:
            HeartbeatConfigurationError: If the resulting values are invalid.
        """
        return cls(
            heartbeat_interval_seconds=_get_float_env("HEARTBEAT_INTERVAL_SECONDS", 60.0),
            liveness_threshold_seconds=_get_float_env(
                "HEARTBEAT_LIVENESS_THRESHOLD_SECONDS", 120.0
            ),
            push_url=os.environ.get("HEARTBEAT_PUSH_URL") or None,
            port=_get_optional_int_env("HEARTBEAT_PORT"),
            http_timeout_seconds=_get_optional_float_env("HEARTBEAT_HTTP_TIMEOUT_SECONDS"),
            host=os.environ.get("HEARTBEAT_HOST") or "0.0.0.0",
            on_error=on_error,
        )
