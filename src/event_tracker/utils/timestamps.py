"""ISO-8601 parsing and UTC normalization."""

import re
from datetime import UTC, date, datetime, time

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_date_only(value: str) -> bool:
    return bool(_DATE_ONLY.match(value.strip()))


def parse_iso8601(value: str | datetime | date, *, end_of_day: bool = False) -> datetime:
    """Parse an ISO-8601 date or date-time into an aware UTC datetime.

    Bare dates resolve to midnight UTC, or to the last microsecond of that
    day when ``end_of_day`` is set (inclusive upper bounds).

    Raises:
        ValueError: If the value is not ISO-8601, or its UTC instant falls
            outside the years 1-9999.
    """
    if isinstance(value, datetime):
        try:
            return ensure_utc(value)
        except OverflowError as exc:
            raise ValueError(f"timestamp out of range: {value.isoformat()}") from exc
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min, tzinfo=UTC)

    text = value.strip()
    if not text:
        raise ValueError("empty timestamp")

    if is_date_only(text):
        return parse_iso8601(date.fromisoformat(text), end_of_day=end_of_day)

    return parse_iso8601(datetime.fromisoformat(text))
