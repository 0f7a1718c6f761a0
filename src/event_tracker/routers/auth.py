"""Authentication API router."""

from fastapi import APIRouter, Request, status

from event_tracker.config import settings
from event_tracker.deps import AuthenticatedUser, Store
from event_tracker.rate_limit import RateLimiter, auth_rate_limiter, register_rate_limiter
from event_tracker.schemas import (
    AuthResponse,
    CurrentUserResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserDetailResponse,
    UserResponse,
)
from event_tracker.services import AuthResult, account_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _get_client_ip(request: Request) -> str:
    """Extract client IP, trusting X-Forwarded-For only behind a known proxy."""
    if settings.trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP (original client)
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _check_rate_limit(request: Request, limiter: RateLimiter, message: str) -> None:
    if settings.rate_limit_enabled:
        limiter.check(_get_client_ip(request), message)


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def register(request: Request, data: RegisterRequest, store: Store) -> AuthResponse:
    """Register a new user and return a bearer token."""
    _check_rate_limit(request, register_rate_limiter, "Too many registration attempts. Please try again later.")

    result = await account_service.register(store, data.username, data.email, data.password)

    register_rate_limiter.reset(_get_client_ip(request))
    return _auth_response("User registered successfully", result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def login(request: Request, data: LoginRequest, store: Store) -> AuthResponse:
    """Login with email and password."""
    _check_rate_limit(request, auth_rate_limiter, "Too many login attempts. Please try again later.")

    result = await account_service.login(store, data.email, data.password)

    auth_rate_limiter.reset(_get_client_ip(request))
    return _auth_response("Login successful", result)


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(user: AuthenticatedUser, store: Store) -> CurrentUserResponse:
    """Get the authenticated user."""
    identity = await store.get_user_by_id(user.id)
    return CurrentUserResponse(user=UserDetailResponse.model_validate(identity))
