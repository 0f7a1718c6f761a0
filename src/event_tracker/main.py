"""Event Tracker Backend - FastAPI Application."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from event_tracker import __version__
from event_tracker.config import settings
from event_tracker.database import engine, init_db
from event_tracker.deps import DbSession
from event_tracker.errors import register_exception_handlers
from event_tracker.logger import configure_logging, get_logger
from event_tracker.rate_limit import auth_rate_limiter, register_rate_limiter
from event_tracker.routers import auth, events

# Initialize logging early
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - prepare the schema on startup, release pools on shutdown."""
    if settings.uses_default_secret and settings.environment == "production":
        logger.critical("SECRET_KEY is the development default; refusing to start")
        raise RuntimeError("SECRET_KEY must be set in production")

    await init_db()
    logger.info("Application started", version=__version__, environment=settings.environment)
    yield

    # Close rate limiters (Redis connections)
    auth_rate_limiter.close()
    register_rate_limiter.close()
    await engine.dispose()
    logger.info("Application shutting down")


app = FastAPI(
    title="Event Tracker API",
    description="Personal calendar events with token-authenticated CRUD",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next: Any) -> Response:
    """Middleware to inject Request-ID and log request details."""
    request_id = request.headers.get("X-Request-ID", str(uuid4()))

    # structlog.contextvars are isolated per async context/task;
    # clear to start each top-level request task clean.
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception(
            "HTTP Request Failed",
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            error=str(exc),
        )
        raise

    logger.info(
        "HTTP Request",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


register_exception_handlers(app)

# CORS for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

app.include_router(auth.router)
app.include_router(events.router)


@app.get("/health")
async def health_check(db: DbSession) -> Response:
    """Report database connectivity; 503 when the database is unreachable."""
    checks: dict[str, bool] = {}
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except (SQLAlchemyError, OSError) as exc:
        logger.error(
            "Health check: database unreachable",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        checks["database"] = False

    healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
            "checks": checks,
        },
    )
