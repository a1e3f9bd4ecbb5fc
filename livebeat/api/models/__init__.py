"""Pydantic models for the health endpoint and push acknowledgements."""

from livebeat.api.models.health import HealthResponse
from livebeat.api.models.push import PushAcknowledgement

__all__: list[str] = ["HealthResponse", "PushAcknowledgement"]
