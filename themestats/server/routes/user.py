"""POST /api/user/ratings endpoint handler."""
from fastapi import APIRouter, Request

from themestats.server.models.requests import UserRatingsRequest
from themestats.server.routes._helpers import client_ip
from themestats.state.coordinator import MutationCoordinator


def create_user_router(coordinator: MutationCoordinator, client_ip_header: str) -> APIRouter:
    """Create user router with injected dependencies."""
    router = APIRouter()

    @router.post("/ratings", response_model=dict[str, int], tags=["user"])
    async def user_ratings(request: Request, body: UserRatingsRequest) -> dict[str, int]:
        """Every rating given by the signing identity, keyed by theme id."""
        return await coordinator.user_ratings(body.to_envelope(), client_ip(request, client_ip_header))

    return router
