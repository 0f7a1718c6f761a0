"""Authentication gate: bearer token to request-scoped user identity."""

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from event_tracker.database import get_db
from event_tracker.logger import get_logger
from event_tracker.security import InvalidTokenError, TokenExpiredError, decode_access_token
from event_tracker.store import EventStore
from event_tracker.utils.exceptions import Forbidden, Unauthenticated

logger = get_logger(__name__)

# auto_error=False so a missing header reaches us and becomes our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str
    email: str


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CurrentUser:
    """Resolve the caller from `Authorization: Bearer <token>`.

    Missing token, expired token, or a token for a user that no longer exists
    is 401; a malformed or badly signed token is 403.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenExpiredError as exc:
        raise Unauthenticated("Token has expired") from exc
    except InvalidTokenError as exc:
        raise Forbidden("Invalid or expired token") from exc

    user = await EventStore(db).get_user_by_id(claims.user_id)
    if user is None:
        logger.info("Token references missing user", user_id=claims.user_id)
        raise Unauthenticated("Invalid token - user not found")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return CurrentUser(id=user.id, username=user.username, email=user.email)
