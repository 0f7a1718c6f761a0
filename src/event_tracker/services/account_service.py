"""Registration and login orchestration."""

from dataclasses import dataclass
from functools import lru_cache

from event_tracker.logger import get_logger
from event_tracker.security import (
    create_access_token,
    hash_password,
    hash_password_async,
    verify_password_async,
)
from event_tracker.store import ConstraintViolation, EventStore, UserIdentity
from event_tracker.utils.exceptions import Conflict, InvalidCredentials

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    # Checked when the email is unknown so both failure paths pay for a bcrypt comparison
    return hash_password("not-a-real-password")


@dataclass(frozen=True)
class AuthResult:
    user: UserIdentity
    token: str


async def register(store: EventStore, username: str, email: str, password: str) -> AuthResult:
    """Create an account and issue its first token.

    Raises:
        Conflict: The email is already registered, or the store rejected the
            username/email as a duplicate (e.g. a concurrent registration).
    """
    if await store.get_user_by_email(email) is not None:
        raise Conflict("User with this email already exists")

    password_hash = await hash_password_async(password)
    try:
        user = await store.create_user(username, email, password_hash)
    except ConstraintViolation as exc:
        raise Conflict("Username or email already exists") from exc

    logger.info("User registered", user_id=user.id)
    identity = UserIdentity(id=user.id, username=user.username, email=user.email, created_at=user.created_at)
    return AuthResult(user=identity, token=create_access_token(user.id))


async def login(store: EventStore, email: str, password: str) -> AuthResult:
    """Verify credentials and issue a token.

    Unknown email and wrong password raise the same InvalidCredentials so
    callers cannot probe which accounts exist.
    """
    user = await store.get_user_by_email(email)
    stored_hash = user.password if user is not None else _dummy_password_hash()
    password_ok = await verify_password_async(password, stored_hash)

    if user is None or not password_ok:
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    logger.info("Successful login", user_id=user.id)
    identity = UserIdentity(id=user.id, username=user.username, email=user.email, created_at=user.created_at)
    return AuthResult(user=identity, token=create_access_token(user.id))
