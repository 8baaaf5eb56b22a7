"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from traintrack.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="TrainTrack starting up", timestamp=start_time.isoformat())

    from traintrack.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="TrainTrack shutting down gracefully")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure all middleware in correct order."""
    # Last added runs first: RequestID -> Session -> SentryContext -> routes
    from traintrack.middleware.logging import RequestIDMiddleware
    from traintrack.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=14 * 24 * 60 * 60,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from traintrack.api.auth import router as auth_router
    from traintrack.api.enrollments import router as enrollments_router
    from traintrack.api.health import router as health_router
    from traintrack.api.nominations import router as nominations_router
    from traintrack.api.training_catalog import router as catalog_router
    from traintrack.api.training_sessions import router as sessions_router
    from traintrack.api.users import router as users_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(catalog_router)
    app.include_router(sessions_router)
    app.include_router(enrollments_router)
    app.include_router(nominations_router)


def create_app() -> FastAPI:
    """Application factory for TrainTrack."""
    app = FastAPI(
        title="TrainTrack API",
        description="Manufacturing training compliance and nomination workflow",
        version="0.1.0",
        lifespan=lifespan,
    )

    from traintrack.core.exception_handlers import register_exception_handlers
    from traintrack.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")

    _setup_middleware(app, environment, session_secret_key)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "traintrack.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
