"""Pydantic schemas for authentication."""

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from event_tracker.schemas.base import BaseResponse, MessageResponse, UtcDatetime

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """Schema for user registration."""

    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
    email: EmailStr
    password: Annotated[str, Field(min_length=6)]

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: Annotated[str, Field(min_length=1)]

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseResponse):
    """Public view of a user; never includes the password hash."""

    id: int
    username: str
    email: str


class UserDetailResponse(UserResponse):
    created_at: UtcDatetime | None = None


class AuthResponse(MessageResponse):
    """Schema for register/login responses - user info plus a bearer token."""

    user: UserResponse
    token: str
    token_type: str = "bearer"


class CurrentUserResponse(BaseModel):
    user: UserDetailResponse
