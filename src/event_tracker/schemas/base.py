"""Base schema classes and shared field types."""

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_core import PydanticCustomError

from event_tracker.utils.timestamps import ensure_utc, parse_iso8601


class BaseResponse(BaseModel):
    """Base for all response schemas with from_attributes config."""

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Success envelope: every success body carries a human-readable message."""

    message: str


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, (str, date)):
        try:
            return parse_iso8601(value)
        except ValueError:
            pass
    raise PydanticCustomError("iso8601", "Must be a valid ISO 8601 date")


def _as_utc(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


# Request side: ISO-8601 string in, aware UTC datetime out
IsoTimestamp = Annotated[datetime, BeforeValidator(_parse_timestamp)]

# Response side: SQLite hands back naive datetimes, stored values are always UTC
UtcDatetime = Annotated[datetime, BeforeValidator(_as_utc)]
