"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import Settings, get_settings
from shared.logging_setup import setup_logging
from .dependencies import ServiceContainer
from .errors import register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the container's or the cached ones
        container: Pre-built service container (tests inject repositories here)

    Returns:
        Configured FastAPI instance
    """
    # Route modules import api.*, so they are loaded here rather than at module level
    from .routes import health
    from modules.auth.routes import router as auth_router
    from modules.tasks.routes import router as tasks_router

    if settings is None:
        settings = container.settings if container is not None else get_settings()
    if container is None:
        container = ServiceContainer(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Runs startup and shutdown logic.
        """
        setup_logging(settings.log_level)
        logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
        if not settings.jwt_secret:
            logger.warning("JWT_SECRET is not set; login and protected routes will fail")
        yield
        logger.info("Shutting down %s", settings.app_name)

    app = FastAPI(
        title=settings.app_name,
        description="Task management API with per-user task ownership",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )
    app.state.container = container

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, tags=["health"])
    app.include_router(auth_router, prefix="/api/user", tags=["user"])
    app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])

    return app
