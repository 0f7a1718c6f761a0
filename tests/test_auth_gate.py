"""Tests for bearer-token resolution on protected routes."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from event_tracker.config import settings
from event_tracker.security import create_access_token
from event_tracker.store import EventStore


@pytest.mark.asyncio
async def test_missing_token_is_unauthenticated(public_client):
    response = await public_client.get("/api/events")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated", "message": "No token provided"}
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_non_bearer_scheme_is_unauthenticated(public_client):
    response = await public_client.get("/api/events", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthenticated"


@pytest.mark.asyncio
async def test_expired_token_is_unauthenticated(public_client, test_user):
    token = create_access_token(test_user.id, expires_delta=timedelta(minutes=-5))

    response = await public_client.get("/api/events", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated", "message": "Token has expired"}


@pytest.mark.asyncio
async def test_token_signed_with_another_key_is_forbidden(public_client, test_user):
    token = jwt.encode(
        {"sub": str(test_user.id), "exp": datetime.now(UTC) + timedelta(hours=1)},
        "some-other-secret-that-is-long-enough",
        algorithm=settings.jwt_algorithm,
    )

    response = await public_client.get("/api/events", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden", "message": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_garbage_token_is_forbidden(public_client):
    response = await public_client.get("/api/events", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_unauthenticated(public_client, store: EventStore, test_user):
    token = create_access_token(test_user.id)
    await store.delete_user(test_user.id)

    response = await public_client.get("/api/events", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated", "message": "Invalid token - user not found"}


@pytest.mark.asyncio
async def test_valid_token_reaches_route(client):
    response = await client.get("/api/events")

    assert response.status_code == 200
    assert response.json() == {"message": "Events retrieved successfully", "count": 0, "events": []}
