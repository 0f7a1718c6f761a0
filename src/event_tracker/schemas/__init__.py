from event_tracker.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserDetailResponse,
    UserResponse,
)
from event_tracker.schemas.base import BaseResponse, IsoTimestamp, MessageResponse, UtcDatetime
from event_tracker.schemas.error import ErrorDetail, ErrorResponse
from event_tracker.schemas.event import (
    EventDeletedResponse,
    EventEnvelope,
    EventListResponse,
    EventResponse,
    EventWrite,
)

__all__ = [
    "AuthResponse",
    "BaseResponse",
    "CurrentUserResponse",
    "ErrorDetail",
    "ErrorResponse",
    "EventDeletedResponse",
    "EventEnvelope",
    "EventListResponse",
    "EventResponse",
    "EventWrite",
    "IsoTimestamp",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserDetailResponse",
    "UserResponse",
    "UtcDatetime",
]
