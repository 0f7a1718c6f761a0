"""Calendar event model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_tracker.database import Base
from event_tracker.models.base import IntegerIdMixin, TimestampMixin

if TYPE_CHECKING:
    from event_tracker.models.user import User

# Fields a caller may set; update replaces all of them at once
EVENT_MUTABLE_FIELDS = ("title", "description", "start_date", "end_date", "location", "all_day")


class Event(IntegerIdMixin, TimestampMixin, Base):
    """A calendar event owned by exactly one user."""

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_user_id_start_date", "user_id", "start_date"),)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    owner: Mapped["User"] = relationship(back_populates="events")

    def __repr__(self) -> str:
        return f"<Event id={self.id} user_id={self.user_id} title={self.title!r}>"
