"""Common FastAPI dependencies for consistent type annotations.

Usage:
    from event_tracker.deps import AuthenticatedUser, Store

    async def my_endpoint(store: Store, user: AuthenticatedUser):
        # store is an EventStore bound to this request's session
        # user is the CurrentUser resolved from the bearer token
        ...
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from event_tracker.auth import CurrentUser, get_current_user
from event_tracker.database import get_db
from event_tracker.store import EventStore

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_store(db: DbSession) -> EventStore:
    return EventStore(db)


Store = Annotated[EventStore, Depends(get_store)]
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]

__all__ = ["AuthenticatedUser", "DbSession", "Store", "get_store"]
