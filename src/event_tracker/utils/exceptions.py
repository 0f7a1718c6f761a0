"""Error taxonomy shared by services and routers.

Each error knows its HTTP status and the short category string clients
receive in the `error` field of the JSON body.
"""

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    category: str = "InternalError"
    default_message: str = "An internal server error occurred. Please try again later."

    def __init__(
        self,
        message: str | None = None,
        *,
        details: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.category, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    category = "ValidationFailed"
    default_message = "Validation failed"


class InvalidDateRange(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    category = "InvalidDateRange"
    default_message = "End date cannot be before start date"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    category = "Unauthenticated"
    default_message = "No token provided"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    category = "InvalidCredentials"
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    category = "Forbidden"
    default_message = "Invalid or expired token"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    category = "NotFound"
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    category = "Conflict"
    default_message = "Resource already exists"


class RateLimited(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    category = "RateLimited"
    default_message = "Too many requests. Please try again later."

    def __init__(self, message: str | None = None, *, retry_after: int | None = None) -> None:
        headers = {"Retry-After": str(retry_after)} if retry_after else None
        super().__init__(message, headers=headers)
        self.retry_after = retry_after


class InternalError(AppError):
    pass


# Status codes Starlette may raise on its own (unknown route, wrong method)
CATEGORY_BY_STATUS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: ValidationFailed.category,
    status.HTTP_401_UNAUTHORIZED: Unauthenticated.category,
    status.HTTP_403_FORBIDDEN: Forbidden.category,
    status.HTTP_404_NOT_FOUND: NotFound.category,
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowed",
    status.HTTP_409_CONFLICT: Conflict.category,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimited.category,
}


def category_for_status(status_code: int) -> str:
    if status_code >= 500:
        return InternalError.category
    return CATEGORY_BY_STATUS.get(status_code, "HTTPError")
