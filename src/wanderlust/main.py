"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from wanderlust.config import get_settings
from wanderlust.database import close_db, create_all, init_db
from wanderlust.health.router import router as health_router
from wanderlust.middleware import setup_middleware
from wanderlust.redis_client import close_redis, init_redis
from wanderlust.roles.router import router as roles_router
from wanderlust.social.router import router as social_router
from wanderlust.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    # SQLite has no migration run in front of it
    if settings.database_url.startswith("sqlite"):
        await create_all()

    logger.info("startup", environment=settings.environment, version=settings.app_version)
    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Wanderlust API",
        description="Social graph, activity feed and roles for the Wanderlust travel platform",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(social_router)
    app.include_router(roles_router)

    return app


app = create_app()
