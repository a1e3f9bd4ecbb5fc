"""
livebeat - Liveness-tracking heartbeat emitter

Records when a monitored process last reported itself alive, pushes a
heartbeat to a remote monitoring URL while that report is fresh, and
optionally serves a local health endpoint reflecting the same judgment.

Usage:
    from livebeat import HeartbeatConfig, HeartbeatMonitor

    monitor = HeartbeatMonitor(
        HeartbeatConfig(
            heartbeat_interval_seconds=60,
            liveness_threshold_seconds=120,
            push_url="https://status.example.com/api/push/abc123",
            port=8080,
        )
    )
    monitor.start()  # inside a running event loop
    monitor.report_alive()
"""

from livebeat.application.services.heartbeat_monitor import HeartbeatMonitor
from livebeat.config.heartbeat_config import HeartbeatConfig
from livebeat.domain.errors.heartbeat import (
    HealthListenerError,
    HeartbeatConfigurationError,
    PushFailedError,
)
from livebeat.domain.exceptions import LivebeatError

__version__ = "0.1.0"
__all__ = [
    "HealthListenerError",
    "HeartbeatConfig",
    "HeartbeatConfigurationError",
    "HeartbeatMonitor",
    "LivebeatError",
    "PushFailedError",
    "__version__",
]
