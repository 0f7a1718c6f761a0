"""Utility functions and helpers."""

from .exceptions import (
    AppError,
    Conflict,
    Forbidden,
    InternalError,
    InvalidCredentials,
    InvalidDateRange,
    NotFound,
    RateLimited,
    Unauthenticated,
    ValidationFailed,
    category_for_status,
)
from .timestamps import ensure_utc, parse_iso8601

__all__ = [
    "AppError",
    "Conflict",
    "Forbidden",
    "InternalError",
    "InvalidCredentials",
    "InvalidDateRange",
    "NotFound",
    "RateLimited",
    "Unauthenticated",
    "ValidationFailed",
    "category_for_status",
    "ensure_utc",
    "parse_iso8601",
]
