"""Application services for livebeat."""

from livebeat.application.services.heartbeat_monitor import HeartbeatMonitor

__all__: list[str] = ["HeartbeatMonitor"]
