"""CodeHunt FastAPI application."""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from codehunt.config import Settings, get_settings
from codehunt.logging_config import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from codehunt.middleware.rate_limit import RateLimitMiddleware
from codehunt.redis import connect_redis, disconnect_redis, get_redis, redis_status
from codehunt.routes.admin import router as admin_router
from codehunt.routes.phases import router as phases_router
from codehunt.routes.teams import router as teams_router
from codehunt.store.factory import create_team_store

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the team store and optional Redis; tear down on shutdown."""
    settings: Settings = app.state.settings
    store = app.state.team_store

    logger.info("starting_team_store", backend=store.name)
    await store.start()

    await connect_redis(settings)

    if not settings.admin_api_key:
        logger.warning("admin_routes_unprotected")

    logger.info("application_started", backend=store.name)
    yield

    logger.info("shutting_down")
    await disconnect_redis()
    await store.close()
    logger.info("shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="CodeHunt",
        description="Team progress and answer checking for the CodeHunt scavenger hunt",
        version=settings.service_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.team_store = create_team_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.redis_url:
        app.add_middleware(
            RateLimitMiddleware,
            redis_getter=get_redis,
            limit=settings.rate_limit_per_minute,
        )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        bind_request_context(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.debug else "An unexpected error occurred",
            },
        )

    app.include_router(teams_router)
    app.include_router(phases_router)
    app.include_router(admin_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "database": app.state.team_store.name,
            "rateLimiter": await redis_status(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
