"""GET /api/stats endpoint handler."""
from fastapi import APIRouter

from themestats.server.models.responses import ThemeStatsResponse
from themestats.state.database import DatabaseManager
from themestats.state.repositories.kv import KeyValueStore
from themestats.state.stats import collect_theme_stats


def create_stats_router(db: DatabaseManager) -> APIRouter:
    """Create stats router with injected dependencies."""
    router = APIRouter()

    @router.get("", response_model=dict[str, ThemeStatsResponse], tags=["stats"])
    async def get_stats() -> dict[str, ThemeStatsResponse]:
        """Installs and rating aggregate for every theme with any activity."""
        async with db.connection() as conn:
            stats = await collect_theme_stats(conn, KeyValueStore(conn))
        return {
            theme_id: ThemeStatsResponse(
                installs=s.installs, rating=s.rating, rating_count=s.rating_count,
            )
            for theme_id, s in stats.items()
        }

    return router
