"""Background outputs of a heartbeat monitor.

- PushSender: periodic GET to a remote push URL while alive
- HealthServer: local HTTP listener answering health checks
- ErrorDispatcher: fire-and-forget delivery of their runtime errors
"""

from livebeat.infrastructure.monitoring.error_dispatcher import ErrorDispatcher
from livebeat.infrastructure.monitoring.health_server import HealthServer
from livebeat.infrastructure.monitoring.push_sender import PushSender

__all__: list[str] = ["ErrorDispatcher", "HealthServer", "PushSender"]
