"""Health check endpoint for a heartbeat monitor.

Answers GET on any path with the current liveness judgment:
- 200 {"ok":true} while the last report is within the threshold
- 503 {"ok":false} otherwise (never reported, or report too old)

Other methods are rejected with 405 by the router, without reading state.
Every request re-reads LivenessState; nothing is cached.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from livebeat.api.dependencies.liveness import get_liveness_state
from livebeat.api.models.health import HealthResponse
from livebeat.domain.models.liveness_state import LivenessState

router = APIRouter(tags=["health"])


@router.get(
    "/{path:path}",
    response_model=HealthResponse,
    responses={
        200: {"description": "Subject reported alive within the threshold"},
        503: {"description": "No report within the threshold", "model": HealthResponse},
    },
)
async def health_check(
    liveness: LivenessState = Depends(get_liveness_state),
) -> JSONResponse:
    """Return the liveness judgment for the monitored subject.

    Returns:
        200 with ok=true if alive, 503 with ok=false otherwise.
    """
    if liveness.is_alive():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=HealthResponse(ok=True).model_dump(),
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthResponse(ok=False).model_dump(),
    )
