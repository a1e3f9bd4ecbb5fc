"""Configuration module for livebeat.

Available Configurations:
- HeartbeatConfig: Push interval, liveness threshold, push URL and port
"""

from livebeat.config.heartbeat_config import HeartbeatConfig

__all__ = ["HeartbeatConfig"]
