"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_tracker.database import Base
from event_tracker.models.base import CreatedAtMixin, IntegerIdMixin

if TYPE_CHECKING:
    from event_tracker.models.event import Event


class User(IntegerIdMixin, CreatedAtMixin, Base):
    """Registered account. `password` only ever holds a bcrypt hash."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    events: Mapped[list["Event"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
