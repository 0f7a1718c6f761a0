"""Pydantic schemas for calendar events."""

from typing import Annotated

from pydantic import BaseModel, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from event_tracker.schemas.base import BaseResponse, IsoTimestamp, MessageResponse, UtcDatetime

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
Location = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]

BOOLEAN_STRINGS = {"true": True, "false": False, "1": True, "0": False}


class EventWrite(BaseModel):
    """Body for both create and update; update replaces every field."""

    title: Title
    description: Description | None = None
    start_date: IsoTimestamp
    end_date: IsoTimestamp | None = None
    location: Location | None = None
    all_day: bool = False

    @field_validator("description", "location")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("end_date", mode="before")
    @classmethod
    def empty_end_date_to_none(cls, v: object) -> object:
        if v == "":
            return None
        return v

    @field_validator("all_day", mode="before")
    @classmethod
    def all_day_boolean(cls, v: object) -> bool:
        # true/false, 1/0 (as numbers or strings); null means false
        if v is None:
            return False
        if isinstance(v, bool):
            return v
        if isinstance(v, int) and v in (0, 1):
            return bool(v)
        if isinstance(v, str) and v.strip().lower() in BOOLEAN_STRINGS:
            return BOOLEAN_STRINGS[v.strip().lower()]
        raise PydanticCustomError("boolean", "All day must be a boolean")

    def to_fields(self) -> dict:
        return self.model_dump()


class EventResponse(BaseResponse):
    id: int
    user_id: int
    title: str
    description: str | None = None
    start_date: UtcDatetime
    end_date: UtcDatetime | None = None
    location: str | None = None
    all_day: bool
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None

    @field_validator("all_day", mode="before")
    @classmethod
    def normalize_all_day(cls, v: object) -> bool:
        # SQLite returns 0/1
        return bool(v)


class EventEnvelope(MessageResponse):
    event: EventResponse


class EventListResponse(MessageResponse):
    count: int
    events: list[EventResponse]


class EventDeletedResponse(MessageResponse):
    deleted_event_id: int
