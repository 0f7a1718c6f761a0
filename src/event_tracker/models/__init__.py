"""SQLAlchemy models package."""

from event_tracker.models.event import EVENT_MUTABLE_FIELDS, Event
from event_tracker.models.user import User

__all__ = [
    "EVENT_MUTABLE_FIELDS",
    "Event",
    "User",
]
