"""Application ports - Abstract interfaces for infrastructure adapters.

Available ports:
- TimeAuthorityProtocol: Source of current time for liveness decisions
- ErrorObserver: Callback receiving runtime push/listener errors
"""

from livebeat.application.ports.error_observer import ErrorObserver
from livebeat.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = ["ErrorObserver", "TimeAuthorityProtocol"]
