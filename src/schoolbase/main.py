"""
SchoolBase API - Main Application Entry Point

This module builds the FastAPI application:
- Database and Redis connections (lifespan)
- CORS middleware
- Envelope exception handlers
- API routing under /api
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schoolbase.api import api_router
from schoolbase.core.config import settings
from schoolbase.core.database import Database
from schoolbase.core.redis import close_redis, init_redis
from schoolbase.core.responses import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Connects the database on startup and disposes it on shutdown. Redis is
    optional: without it the login rate limiter keeps its counters in memory.
    """
    logger.info(f"Starting SchoolBase API in {settings.python_env} mode...")
    database: Database = app.state.database

    try:
        await init_redis()
        logger.info("Redis connected")
    except Exception as e:
        logger.warning(f"Redis connection failed, rate limiting falls back to memory: {e}")

    try:
        await database.connect()
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    yield

    logger.info("Shutting down SchoolBase API...")
    await close_redis()
    await database.dispose()
    logger.info("Cleanup complete")


def create_app(database: Database | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        database: Storage handle to use; defaults to one built from settings

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="SchoolBase API",
        description="Multi-tenant school management API",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.database = database or Database(settings.database_url, echo=settings.database_echo)
    app.state.started_at = time.monotonic()

    app.include_router(api_router, prefix="/api")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint - API welcome message."""
        return {
            "message": "Welcome to SchoolBase API",
            "status": "running",
            "environment": settings.python_env,
        }

    return app


configure_logging()
app = create_app()
