"""Calendar event operations scoped to the authenticated user.

Every function takes the caller's user id; events owned by anyone else are
indistinguishable from events that do not exist (both raise NotFound).
"""

from datetime import datetime
from typing import Any

from event_tracker.logger import get_logger
from event_tracker.models import Event
from event_tracker.store import EventStore
from event_tracker.utils.exceptions import InvalidDateRange, NotFound, ValidationFailed
from event_tracker.utils.timestamps import parse_iso8601

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Event does not exist or you do not have access to it"


def _parse_filter(name: str, value: str | None, *, end_of_day: bool = False) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return parse_iso8601(value, end_of_day=end_of_day)
    except ValueError as exc:
        label = "Start date" if name == "start_date" else "End date"
        raise ValidationFailed(
            details=[{"field": name, "message": f"{label} must be a valid ISO 8601 date"}],
        ) from exc


def check_date_range(start_date: datetime, end_date: datetime | None) -> None:
    if end_date is not None and end_date < start_date:
        raise InvalidDateRange()


async def list_events(
    store: EventStore,
    user_id: int,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[Event]:
    """Events whose start lies within the optional inclusive bounds, ascending.

    A bare-date ``end_date`` covers the whole of that day.
    """
    start_from = _parse_filter("start_date", start_date)
    start_to = _parse_filter("end_date", end_date, end_of_day=True)
    return await store.list_events(user_id, start_from=start_from, start_to=start_to)


async def get_event(store: EventStore, user_id: int, event_id: int) -> Event:
    event = await store.get_event(event_id, user_id)
    if event is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return event


async def create_event(store: EventStore, user_id: int, fields: dict[str, Any]) -> Event:
    """Persist a new event after checking its date range."""
    check_date_range(fields["start_date"], fields.get("end_date"))
    fields = {**fields, "all_day": bool(fields.get("all_day"))}

    event = await store.create_event(user_id, fields)
    logger.info("Event created", event_id=event.id, user_id=user_id)
    return event


async def update_event(store: EventStore, user_id: int, event_id: int, fields: dict[str, Any]) -> Event:
    """Replace every mutable field of an owned event."""
    check_date_range(fields["start_date"], fields.get("end_date"))
    fields = {**fields, "all_day": bool(fields.get("all_day"))}

    changed = await store.update_event(event_id, user_id, fields)
    if changed == 0:
        raise NotFound(NOT_FOUND_MESSAGE)

    logger.info("Event updated", event_id=event_id, user_id=user_id)
    return await get_event(store, user_id, event_id)


async def delete_event(store: EventStore, user_id: int, event_id: int) -> int:
    changed = await store.delete_event(event_id, user_id)
    if changed == 0:
        raise NotFound(NOT_FOUND_MESSAGE)

    logger.info("Event deleted", event_id=event_id, user_id=user_id)
    return event_id
