"""FastAPI application factory for the local health endpoint."""

from fastapi import FastAPI

from livebeat.api.routes.health import router as health_router
from livebeat.domain.models.liveness_state import LivenessState


def create_health_app(liveness: LivenessState) -> FastAPI:
    """Build the health app serving one monitor's liveness state.

    Args:
        liveness: The state every request reads.

    Returns:
        A FastAPI app answering GET on any path.
    """
    app = FastAPI(
        title="livebeat health",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.liveness = liveness
    app.include_router(health_router)
    return app
