"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from psycopg import OperationalError
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.dependencies import check_admin_password_hash
from src.api.v1 import router as v1_router
from src.config.logging_config import configure_logging
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "registration",
        "description": "Guest list sign-up and voucher confirmation",
    },
    {
        "name": "activation",
        "description": "On-site activation inside the event window and venue geofence",
    },
    {
        "name": "admin",
        "description": "Venue management and registration review (HTTP BASIC AUTH)",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, venue timezone and admin hash checks, pool, schema.
    Shutdown: close the pool.

    An unknown VENUE_TIMEZONE or malformed ADMIN_PASSWORD_HASH fails startup
    instead of the first request that needs it.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        ZoneInfo(settings.venue_timezone)
    except ZoneInfoNotFoundError as e:
        raise RuntimeError(f"Unknown venue timezone: {settings.venue_timezone}") from e
    logger.info(
        "Activation window %02d:00-23:59:59.999 %s, valid %dh after activation",
        settings.activation_window_start_hour,
        settings.venue_timezone,
        settings.activation_validity_hours,
    )

    if settings.admin_password_hash:
        check_admin_password_hash(settings.admin_password_hash)
    else:
        logger.warning("ADMIN_PASSWORD_HASH is not set; admin routes are disabled")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    run_migrations(pool)
    app.state.pool = pool

    logger.info("Guest list API ready (base URL %s)", settings.public_base_url)

    yield

    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="guestlist",
    description="Guest List Activation API - Register for a venue, activate on site "
    "inside the event window and geofence",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)


@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError) -> JSONResponse:
    """Store unreachable (includes pool timeouts): generic 503, caller may retry."""
    logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Database failures surface as 503 via the OperationalError handler.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
