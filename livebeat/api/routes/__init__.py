"""API routes for the health endpoint."""

from livebeat.api.routes.health import router as health_router

__all__: list[str] = ["health_router"]
