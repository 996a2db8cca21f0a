"""
FastAPI Application Entry Point.

This is the main application file for the Parcel Ops Dashboard backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from opsboard.app.core.config import Settings, settings as default_settings
from opsboard.app.core.observability import ObservabilityMiddleware, configure_logging
from opsboard.app.api.v1.router import router as api_v1_router
from opsboard.app.db.session import Base, build_engine, build_session_factory
from opsboard.app.services.carrier_client import CarrierClient
from opsboard.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from opsboard.app.models.user import User
from opsboard.app.models.parcel import Parcel
from opsboard.app.models.project import Project, ProjectTask
from opsboard.app.models.weekly_plan import WeeklyPlan
from opsboard.app.models.user_settings import UserSettings

logger = logging.getLogger("opsboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Builds the database engine and session factory once.
    2. Creates database tables.
    3. Opens the carrier HTTP client; both are closed on shutdown.
    """
    settings: Settings = app.state.settings

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.carrier_client = CarrierClient(
        settings.carrier_api_url,
        default_token=settings.carrier_api_token,
        timeout=settings.carrier_timeout_seconds,
    )
    logger.info("%s started (api %s)", settings.app_name, settings.api_version)

    yield

    await app.state.carrier_client.aclose()
    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Personal operations dashboard: parcel tracking, projects and weekly plans",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.

        Returns:
            dict: Status and application information
        """
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.api_version,
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.app_name} API",
            "docs": "/docs",
            "health": "/health",
        }

    # Include API v1 router
    app.include_router(api_v1_router, prefix=f"/{settings.api_version}")

    return app


app = create_app()
