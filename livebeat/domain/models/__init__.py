"""Domain models for livebeat."""

from livebeat.domain.models.liveness_state import UNIX_EPOCH, LivenessState

__all__: list[str] = ["LivenessState", "UNIX_EPOCH"]
