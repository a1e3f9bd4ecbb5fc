"""Domain errors for livebeat.

Provides specific exception classes for configuration, push and
listener failures. All exceptions inherit from LivebeatError.
"""

from livebeat.domain.errors.heartbeat import (
    HealthListenerError,
    HeartbeatConfigurationError,
    PushFailedError,
)

__all__: list[str] = [
    "HealthListenerError",
    "HeartbeatConfigurationError",
    "PushFailedError",
]
