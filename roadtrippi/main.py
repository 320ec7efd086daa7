"""
FastAPI application setup.
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import time
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from roadtrippi.config import get_settings
from roadtrippi.core.db import dispose_engine, get_db
from roadtrippi.core.error_handlers import error_handler, setup_error_handlers
from roadtrippi.core.logging import configure_logging
from roadtrippi.middleware import RequestContextMiddleware

# Get application settings
settings = get_settings()

configure_logging(settings)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown: the database engine is created lazily and disposed here."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    try:
        yield
    finally:
        logger.info("Shutting down application")
        await dispose_engine()
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Add CORS middleware with configuration
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    # Add metrics collection middleware
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect per-route request metrics."""
        from roadtrippi.api.metrics_endpoints import metrics_collector

        # Skip metrics collection for metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        latency = time.time() - start_time

        endpoint = f"{request.method} {request.url.path}"
        is_error = response.status_code >= 400
        metrics_collector.record_request(endpoint, latency, is_error)

        return response

    # Include API routers
    from roadtrippi.api import (
        attractions_router,
        users_router,
        lists_router,
        check_ins_router,
        metrics_router,
    )
    app.include_router(attractions_router)
    app.include_router(users_router)
    app.include_router(lists_router)
    app.include_router(check_ins_router)
    app.include_router(metrics_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    async def health_check(db: AsyncSession = Depends(get_db)):
        """Health check: database connectivity plus error statistics."""
        try:
            await db.execute(text("SELECT 1"))
            database = {"status": "healthy", "connection": "ok"}
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            database = {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy" if database["status"] == "healthy" else "unhealthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {"database": database},
            "error_statistics": error_handler.get_error_statistics(),
        }

    return app


# Create application instance
app = create_app()
