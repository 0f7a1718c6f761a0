"""Calendar event API router. Every route requires a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from event_tracker.deps import AuthenticatedUser, Store
from event_tracker.schemas import (
    ErrorResponse,
    EventDeletedResponse,
    EventEnvelope,
    EventListResponse,
    EventResponse,
    EventWrite,
)
from event_tracker.services import event_service

router = APIRouter(
    prefix="/api/events",
    tags=["events"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)

# Ids live in a 32-bit INTEGER column
MAX_EVENT_ID = 2**31 - 1

EventId = Annotated[int, Path(gt=0, le=MAX_EVENT_ID, description="Event ID (positive integer)")]


@router.get("", response_model=EventListResponse)
async def list_events(
    user: AuthenticatedUser,
    store: Store,
    start_date: Annotated[str | None, Query(description="Earliest start (ISO 8601, inclusive)")] = None,
    end_date: Annotated[str | None, Query(description="Latest start (ISO 8601, inclusive)")] = None,
) -> EventListResponse:
    """List the caller's events ascending by start date."""
    events = await event_service.list_events(store, user.id, start_date=start_date, end_date=end_date)
    return EventListResponse(
        message="Events retrieved successfully",
        count=len(events),
        events=[EventResponse.model_validate(event) for event in events],
    )


@router.get("/{event_id}", response_model=EventEnvelope, responses={404: {"model": ErrorResponse}})
async def get_event(event_id: EventId, user: AuthenticatedUser, store: Store) -> EventEnvelope:
    event = await event_service.get_event(store, user.id, event_id)
    return EventEnvelope(message="Event retrieved successfully", event=EventResponse.model_validate(event))


@router.post("", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventWrite, user: AuthenticatedUser, store: Store) -> EventEnvelope:
    event = await event_service.create_event(store, user.id, data.to_fields())
    return EventEnvelope(message="Event created successfully", event=EventResponse.model_validate(event))


@router.put("/{event_id}", response_model=EventEnvelope, responses={404: {"model": ErrorResponse}})
async def update_event(
    event_id: EventId,
    data: EventWrite,
    user: AuthenticatedUser,
    store: Store,
) -> EventEnvelope:
    """Replace every field of an event."""
    event = await event_service.update_event(store, user.id, event_id, data.to_fields())
    return EventEnvelope(message="Event updated successfully", event=EventResponse.model_validate(event))


@router.delete("/{event_id}", response_model=EventDeletedResponse, responses={404: {"model": ErrorResponse}})
async def delete_event(event_id: EventId, user: AuthenticatedUser, store: Store) -> EventDeletedResponse:
    deleted_id = await event_service.delete_event(store, user.id, event_id)
    return EventDeletedResponse(message="Event deleted successfully", deleted_event_id=deleted_id)
