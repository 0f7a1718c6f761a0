"""Services package."""

from event_tracker.services import account_service, event_service
from event_tracker.services.account_service import AuthResult

__all__ = [
    "AuthResult",
    "account_service",
    "event_service",
]
