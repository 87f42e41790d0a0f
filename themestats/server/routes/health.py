"""GET /health endpoint handler."""
from fastapi import APIRouter, status
from themestats.server.models.responses import HealthResponse


def create_health_router() -> APIRouter:
    """Create health router."""
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK, tags=["status"])
    async def health_check() -> HealthResponse:
        """Check if the service is operational."""
        return HealthResponse()

    return router
