"""FastAPI application factory."""
import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from themestats import __version__
from themestats.errors import InvalidJsonError, InvalidRequestError, RateLimitedError, ThemeStatsError
from themestats.protocol.turnstile import TurnstileVerifier
from themestats.server.config import ServerConfig, load_config_from_env
from themestats.server.middleware.logging import RequestLoggingMiddleware, sanitize_dict
from themestats.server.models.responses import ErrorResponse
from themestats.server.routes.health import create_health_router
from themestats.server.routes.identity import create_identity_router
from themestats.server.routes.installs import create_installs_router
from themestats.server.routes.ratings import create_ratings_router
from themestats.server.routes.stats import create_stats_router
from themestats.server.routes.user import create_user_router
from themestats.state.coordinator import MutationCoordinator
from themestats.state.database import DatabaseManager
from themestats.state.exchange import BotCheckExchange, HumanVerifier
from themestats.state.maintenance import purge_expired, purge_expired_periodically

logger = logging.getLogger(__name__)

def create_app(
    config: Optional[ServerConfig] = None,
    verifier: Optional[HumanVerifier] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    When called without arguments (e.g. via uvicorn --factory), loads
    configuration from environment variables. ``verifier`` replaces the
    Turnstile client, e.g. in tests.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if config is None:
        config = load_config_from_env()

    db_manager = DatabaseManager(config.db_path)
    if verifier is None:
        verifier = TurnstileVerifier(
            config.turnstile.secret_key,
            verify_url=config.turnstile.verify_url,
            timeout=config.turnstile.timeout,
        )
    policy = config.rate_limit.policy()
    exchange = BotCheckExchange(
        verifier, config.certificate_signing_key, failure_tier=policy.turnstile_failures,
    )
    coordinator = MutationCoordinator(
        db_manager, exchange, config.certificate_signing_key, policy=policy,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await db_manager.initialize()
        logger.info("Database initialized at %s", config.db_path)
        await purge_expired(db_manager)
        purge_task = asyncio.create_task(
            purge_expired_periodically(db_manager, config.kv_purge_interval_seconds),
        )
        yield
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
        await db_manager.close()

    app = FastAPI(
        title="Theme Stats API",
        description="Signed install counts and ratings for community themes",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware, client_ip_header=config.client_ip_header)
    app.add_exception_handler(ThemeStatsError, _themestats_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    ratings_router = create_ratings_router(coordinator, db_manager, config.client_ip_header)
    app.include_router(create_installs_router(coordinator, config.client_ip_header), prefix="/api/install")
    app.include_router(ratings_router, prefix="/api/rate")
    app.include_router(ratings_router, prefix="/api/rating")
    app.include_router(create_stats_router(db_manager), prefix="/api/stats")
    app.include_router(create_identity_router(db_manager), prefix="/api/identity")
    app.include_router(create_user_router(coordinator, config.client_ip_header), prefix="/api/user")
    app.include_router(create_health_router())
    return app


def _error(status_code: int, code: str, message: str, headers: Optional[dict[str, str]] = None) -> JSONResponse:
    """Build a structured JSON error response."""
    body = ErrorResponse(error=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def _themestats_error_handler(request: Request, exc: ThemeStatsError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimitedError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return _error(exc.status_code, exc.error_code, exc.message, headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return await _themestats_error_handler(request, InvalidJsonError())
    body = getattr(exc, "body", None)
    logger.info(
        "Malformed request to %s: %s body=%s",
        request.url.path,
        [".".join(str(p) for p in e.get("loc", ())) for e in errors],
        sanitize_dict(body) if isinstance(body, dict) else type(body).__name__,
    )
    return await _themestats_error_handler(request, InvalidRequestError())


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # An unrouted method is answered like an unknown path.
    if exc.status_code in (404, 405):
        return _error(404, "NOT_FOUND", "The requested endpoint does not exist")
    return _error(exc.status_code, "HTTP_ERROR", str(exc.detail), getattr(exc, "headers", None))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "INTERNAL_ERROR", "An unexpected error occurred")
