"""Persistence store for users and events.

`EventStore` wraps one `AsyncSession` and is constructed per request (see
`event_tracker.deps`), so services receive their store explicitly rather than
reaching for a module-level connection. Every mutating call commits before it
returns; no transaction spans two calls.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from event_tracker.logger import get_logger, timed_query
from event_tracker.models import EVENT_MUTABLE_FIELDS, Event, User
from event_tracker.models.base import utcnow

logger = get_logger(__name__)


class ConstraintViolation(Exception):
    """A unique or foreign key constraint rejected the write."""


@dataclass(frozen=True)
class UserIdentity:
    """User row without the password hash."""

    id: int
    username: str
    email: str
    created_at: datetime


def _event_values(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(EVENT_MUTABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown event fields: {sorted(unknown)}")
    return {name: fields.get(name) for name in EVENT_MUTABLE_FIELDS}


class EventStore:
    """Durable CRUD for User and Event records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Users ---

    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password=password_hash)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConstraintViolation("Username or email already exists") from exc
        await self.session.refresh(user)
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int) -> UserIdentity | None:
        result = await self.session.execute(
            select(User.id, User.username, User.email, User.created_at).where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return UserIdentity(id=row.id, username=row.username, email=row.email, created_at=row.created_at)

    async def delete_user(self, user_id: int) -> int:
        """Remove a user; the database cascades the delete to their events."""
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.commit()
        return result.rowcount

    # --- Events ---

    async def create_event(self, owner_id: int, fields: dict[str, Any]) -> Event:
        event = Event(user_id=owner_id, **_event_values(fields))
        self.session.add(event)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConstraintViolation("Event owner does not exist") from exc
        await self.session.refresh(event)
        return event

    async def list_events(
        self,
        owner_id: int,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
    ) -> list[Event]:
        """Events owned by ``owner_id`` ascending by start; both bounds inclusive."""
        query = select(Event).where(Event.user_id == owner_id)
        if start_from is not None:
            query = query.where(Event.start_date >= start_from)
        if start_to is not None:
            query = query.where(Event.start_date <= start_to)
        query = query.order_by(Event.start_date.asc(), Event.id.asc()).execution_options(populate_existing=True)

        async with timed_query("list_events", logger, user_id=owner_id) as stats:
            result = await self.session.execute(query)
            events = list(result.scalars().all())
            stats["count"] = len(events)
        return events

    async def get_event(self, event_id: int, owner_id: int) -> Event | None:
        result = await self.session.execute(
            select(Event)
            .where(Event.id == event_id, Event.user_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_event(self, event_id: int, owner_id: int, fields: dict[str, Any]) -> int:
        """Replace every mutable field; returns rows changed (0 = missing or not owned)."""
        values = _event_values(fields)
        values["updated_at"] = utcnow()
        result = await self.session.execute(
            update(Event)
            .where(Event.id == event_id, Event.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount

    async def delete_event(self, event_id: int, owner_id: int) -> int:
        result = await self.session.execute(
            delete(Event)
            .where(Event.id == event_id, Event.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount
