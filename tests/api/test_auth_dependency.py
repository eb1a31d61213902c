"""Tests for bearer token authentication on the API."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.core.auth_jwt import create_access_token, decode_access_token
from app.main import app


@pytest.fixture(autouse=True)
def signing_key(monkeypatch):
    monkeypatch.setattr(settings, "auth_secret_key", "test-signing-key")


@pytest.fixture
def client(db_session):
    return TestClient(app)


def _bearer(user_id: str, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, **kwargs)}"}


def test_token_round_trip_returns_user_id():
    assert decode_access_token(create_access_token("user-1")) == "user-1"


def test_decode_rejects_garbage():
    with pytest.raises(ValueError):
        decode_access_token("not-a-token")


def test_create_rejects_empty_user_id():
    with pytest.raises(ValueError):
        create_access_token("")


def test_valid_token_reaches_endpoint(client, alice):
    response = client.get("/api/v1/training-executions", headers=_bearer(alice.id))

    assert response.status_code == 200
    assert response.json() == []


def test_session_cookie_is_accepted(client, alice):
    client.cookies.set("session", create_access_token(alice.id))

    assert client.get("/api/v1/training-executions").status_code == 200


def test_expired_token_is_rejected(client, alice):
    response = client.get(
        "/api/v1/training-executions",
        headers=_bearer(alice.id, expires_in=timedelta(seconds=-5)),
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_unknown_user_is_rejected(client):
    response = client.get("/api/v1/training-executions", headers=_bearer("ghost"))

    assert response.status_code == 401


def test_inactive_user_is_forbidden(client, make_user):
    inactive = make_user("carol", is_active=False)

    response = client.get("/api/v1/training-executions", headers=_bearer(inactive.id))

    assert response.status_code == 403
