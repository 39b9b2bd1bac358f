"""FastAPI application entry point for the sports follow API."""

import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings as default_settings
from errors import register_error_handlers
from services.cache import TTLCache
from services.follow_store import FollowStore
from services.sportsdb import SportsDBClient

# Structured logging: JSON for production, human-readable for local
if default_settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    missing = settings.validate()
    if missing:
        logger.warning("Missing env vars (falling back to the demo API key): %s", ", ".join(missing))
    logger.info("Follow state file: %s", app.state.follow_store.path)
    yield


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app and the components it shares across requests.

    `transport` replaces the network for upstream calls (tests).
    """
    settings = settings or default_settings
    app = FastAPI(title="Sports App API", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.cache = TTLCache()
    app.state.follow_store = FollowStore(settings.follows_file, legacy_client_id=settings.legacy_client_id)
    app.state.sportsdb = SportsDBClient(
        settings.upstream_base,
        app.state.cache,
        timeout=settings.upstream_timeout,
        transport=transport,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.leagues import router as leagues_router
    from routes.me import router as me_router
    from routes.players import router as players_router
    from routes.teams import router as teams_router

    app.include_router(health_router)
    app.include_router(teams_router)
    app.include_router(players_router)
    app.include_router(leagues_router)
    app.include_router(me_router)

    return app


app = create_app()
