"""
FastAPI Application

Main FastAPI application for AskDB with:
- Lifespan management for service initialization/cleanup
- CORS middleware for frontend integration
- Global exception handlers mapping pipeline errors to statuses
- Generation, quota, database, chat and health endpoints

Usage:
    uvicorn askdb.api.main:app --reload --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from askdb import __version__
from askdb.api.routes import chat, database, generate, health, quota
from askdb.config import get_settings
from askdb.connectors.base import ConnectionError as ConnectorConnectionError
from askdb.connectors.base import ExecutionError, SchemaError
from askdb.errors import AskDBError
from askdb.services import Services, open_services

logger = logging.getLogger(__name__)

# Global state for wired services
app_state: dict[str, Services | None] = {
    "services": None,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan context manager for startup and shutdown.

    Initializes:
    - Redis-backed rate limiter
    - Model provider and generators
    - Chat session history (durable when SYSTEM_DATABASE_URL is set)
    """
    config = get_settings()
    logger.info("Starting AskDB API server...")

    try:
        app_state["services"] = await open_services(config)
        logger.info("AskDB API server started successfully")

        yield  # Application runs here

    finally:
        logger.info("Shutting down AskDB API server...")
        services = app_state["services"]
        if services is not None:
            try:
                await services.close()
            except Exception as e:
                logger.error(f"Error closing services: {e}")
            app_state["services"] = None
        logger.info("AskDB API server shut down complete")


app = FastAPI(
    title="AskDB API",
    description="Natural language to SQL for PostgreSQL databases",
    version=__version__,
    lifespan=lifespan,
)

config = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AskDBError)
async def askdb_error_handler(request: Request, exc: AskDBError) -> JSONResponse:
    """Map pipeline errors to their status code and ``{"error": ...}`` body."""
    log = logger.warning if exc.recoverable else logger.error
    log(
        f"Request failed: {exc.message}",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
            "recoverable": exc.recoverable,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(ConnectorConnectionError)
async def connection_error_handler(request: Request, exc: ConnectorConnectionError) -> JSONResponse:
    """Unreachable target or malformed connection string."""
    logger.warning(f"Target database connection error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )


@app.exception_handler(ExecutionError)
async def execution_error_handler(request: Request, exc: ExecutionError) -> JSONResponse:
    """Statement rejected by the target database."""
    logger.info(f"Query execution error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )


@app.exception_handler(SchemaError)
async def schema_error_handler(request: Request, exc: SchemaError) -> JSONResponse:
    logger.error(f"Schema introspection error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(generate.router, prefix="/api/v1", tags=["generate"])
app.include_router(quota.router, prefix="/api/v1", tags=["quota"])
app.include_router(database.router, prefix="/api/v1", tags=["database"])
app.include_router(chat.router, prefix="/api/v1", tags=["chat"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "AskDB API",
        "version": __version__,
        "description": "Natural language to SQL for PostgreSQL databases",
        "docs": "/docs",
    }


def get_services() -> Services:
    """Get the initialized services."""
    services = app_state["services"]
    if services is None:
        raise RuntimeError("Services not initialized")
    return services
