"""Exception handlers that shape every error as {error, message[, details]}."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_tracker.config import settings
from event_tracker.logger import get_logger, log_exception
from event_tracker.utils.exceptions import AppError, InternalError, ValidationFailed, category_for_status

logger = get_logger(__name__)


def _field_name(loc: tuple[Any, ...]) -> str:
    # ("body", "title") -> "title"; ("path", "event_id") -> "event_id"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def validation_details(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    details = []
    for error in errors:
        message = error.get("msg", "Invalid value")
        # pydantic prefixes ValueError messages from validators
        message = message.removeprefix("Value error, ")
        details.append({"field": _field_name(tuple(error.get("loc", ()))), "message": message})
    return details


def _response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        log_exception(logger, exc, "Request failed with internal error")
    return _response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(list(exc.errors()))
    logger.info("Request validation failed", fields=[d["field"] for d in details])
    return _response(ValidationFailed("Validation failed", details=details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": category_for_status(exc.status_code), "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Collapse anything unexpected to a bare InternalError body."""
    log_exception(logger, exc, "Unhandled exception")
    body = InternalError().to_dict()
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    if request_id:
        body["request_id"] = request_id
    # Only show exception details in DEBUG mode
    if settings.debug:
        body["debug"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=InternalError.status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
