"""Liveness state dependency.

The health app is built per monitor, so the LivenessState lives on
``app.state`` rather than in a module-level singleton.
"""

from __future__ import annotations

from fastapi import Request

from livebeat.domain.models.liveness_state import LivenessState


def get_liveness_state(request: Request) -> LivenessState:
    """Get the LivenessState the serving app was built with.

    Args:
        request: The incoming request.

    Returns:
        The monitor's LivenessState.
    """
    return request.app.state.liveness
