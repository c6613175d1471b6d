"""Main FastAPI application for the diagnostic test records service.

This module sets up the FastAPI application with all routes, middleware,
exception handlers and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dxrecords.api.dependencies import get_storage_adapter
from dxrecords.api.errors import register_exception_handlers
from dxrecords.api.logging_config import setup_logging
from dxrecords.api.middleware import setup_middleware
from dxrecords.api.routes import health, records
from dxrecords.infrastructure.settings import settings

setup_logging(use_json=settings.json_logs, log_level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"{settings.app_name} API starting up...")
    logger.info("API documentation available at /api/docs")
    logger.info(f"Logging level: {settings.log_level}")
    yield
    # The storage adapter is created lazily; only close it if a request created it
    if get_storage_adapter.cache_info().currsize:
        get_storage_adapter().close()
        get_storage_adapter.cache_clear()
    logger.info(f"{settings.app_name} API shutting down...")


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Create, retrieve, list, update and delete diagnostic test records",
    version=settings.app_version,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"],
)

setup_middleware(app)
register_exception_handlers(app)

app.include_router(health.router)
app.include_router(records.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/api/docs",
        "health": "/api/health",
        "tests": "/api/tests"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dxrecords.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
