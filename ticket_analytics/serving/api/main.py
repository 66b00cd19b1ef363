"""
FastAPI Application Factory

Creates and configures the analytics API: lifespan-managed document store and
cache, middleware, routers, and the translation of engine failures into a
generic 503 response.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ticket_analytics.config import get_settings
from ticket_analytics.config.logging import configure_logging
from ticket_analytics.database.connection import close_database, init_database
from ticket_analytics.exceptions import AnalyticsError
from ticket_analytics.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from ticket_analytics.serving.api.routes import analytics_router, health_router
from ticket_analytics.serving.cache import close_redis, init_redis
from ticket_analytics.store import DocumentStore, InMemoryDocumentStore, SQLDocumentStore

logger = structlog.get_logger(__name__)


async def build_store() -> DocumentStore:
    """Document store for the configured backend"""
    settings = get_settings()
    if settings.analytics.store_backend == "memory":
        logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()

    await init_database()
    return SQLDocumentStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Ticket Analytics API")

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = await build_store()

    try:
        await init_redis()
    except Exception as e:
        logger.warning("Redis init failed, dashboard caching disabled", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_redis()
    if owns_store:
        await close_database()


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    logger.error(
        "Analytics request failed",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=503, content={"detail": "Analytics temporarily unavailable"})


def create_api_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Pre-built document store; when omitted the lifespan builds one
            from settings and closes it on shutdown

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Ticket Analytics API",
        description="Daily rollups, growth trends and forecasts for ticket sales",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    if store is not None:
        app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(AnalyticsError, analytics_error_handler)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Ticket Analytics API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app
