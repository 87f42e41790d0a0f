"""Route handlers for the themes API."""
from themestats.server.routes.health import create_health_router
from themestats.server.routes.identity import create_identity_router
from themestats.server.routes.installs import create_installs_router
from themestats.server.routes.ratings import create_ratings_router
from themestats.server.routes.stats import create_stats_router
from themestats.server.routes.user import create_user_router
__all__ = [
    "create_health_router",
    "create_identity_router",
    "create_installs_router",
    "create_ratings_router",
    "create_stats_router",
    "create_user_router",
]
