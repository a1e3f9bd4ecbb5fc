"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        ok: True while the last liveness report is within the threshold.
    """

    ok: bool
