"""POST/GET /api/rate/{theme_id} endpoint handlers (also mounted at /api/rating)."""
from fastapi import APIRouter, Depends, Request, status

from themestats.server.models.requests import RatingRequest
from themestats.server.models.responses import RatingResponse, RatingStatsResponse
from themestats.server.routes._helpers import client_ip, validate_theme_id
from themestats.state.coordinator import MutationCoordinator
from themestats.state.database import DatabaseManager
from themestats.state.repositories.ratings import RatingRepository


def create_ratings_router(
    coordinator: MutationCoordinator, db: DatabaseManager, client_ip_header: str,
) -> APIRouter:
    """Create ratings router with injected dependencies."""
    router = APIRouter()

    @router.post(
        "/{theme_id}",
        response_model=RatingResponse,
        response_model_exclude_none=True,
        status_code=status.HTTP_200_OK,
        tags=["ratings"],
    )
    async def submit_rating(
        request: Request, body: RatingRequest, theme_id: str = Depends(validate_theme_id),
    ) -> RatingResponse:
        """Create or update the caller's rating of a theme.

        Needs a certificate or a Turnstile token on every call. A token
        that passes earns a certificate in the response, to be sent
        instead of a token from then on.
        """
        outcome = await coordinator.submit_rating(
            theme_id, body.to_envelope(), client_ip(request, client_ip_header),
        )
        return RatingResponse(**outcome.to_dict())

    @router.get("/{theme_id}", response_model=RatingStatsResponse, tags=["ratings"])
    async def get_rating(theme_id: str = Depends(validate_theme_id)) -> RatingStatsResponse:
        """Average and count of a theme's ratings."""
        async with db.connection() as conn:
            stats = await RatingRepository(conn).get_stats(theme_id)
        return RatingStatsResponse(average=stats.average, count=stats.count)

    return router
