"""FastAPI dependencies for the health endpoint."""

from livebeat.api.dependencies.liveness import get_liveness_state

__all__: list[str] = ["get_liveness_state"]
