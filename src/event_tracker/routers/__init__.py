"""API routers."""

from event_tracker.routers import auth, events

__all__ = ["auth", "events"]
