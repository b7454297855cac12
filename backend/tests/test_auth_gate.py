from datetime import timedelta

from app.api.deps import REFRESH_TOKEN_HEADER, RENEWED_ACCESS_TOKEN_HEADER
from app.config import settings
from app.core.security import TokenClass, create_access_token, create_refresh_token, decode_token
from app.models.user import User

ME = "/api/v1/users/me"


def _session(client):
    response = client.post(
        "/api/v1/users/register",
        json={"username": "bob", "email": "bob@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    return response.json()


def _expired_access(user_id):
    return create_access_token(user_id, expires_delta=timedelta(seconds=-60))


def test_missing_bearer_is_unauthenticated(client):
    response = client.get(ME)
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthenticated"
    assert response.json()["success"] is False


def test_garbage_bearer_is_forbidden(client):
    response = client.get(ME, headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid token"


def test_refresh_token_is_not_an_access_token(client, outbox):
    tokens = _session(client)
    response = client.get(ME, headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert response.status_code == 403


def test_valid_bearer_returns_profile(client, outbox):
    tokens = _session(client)
    response = client.get(ME, headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert response.status_code == 200
    assert response.json()["username"] == "bob"
    assert RENEWED_ACCESS_TOKEN_HEADER not in response.headers


def test_expired_access_without_silent_refresh(client, outbox):
    tokens = _session(client)
    response = client.get(
        ME,
        headers={
            "Authorization": f"Bearer {_expired_access(tokens['id'])}",
            REFRESH_TOKEN_HEADER: tokens["refresh_token"],
        },
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Token expired"


def test_expired_access_is_renewed_from_refresh_header(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SILENT_REFRESH", True)
    tokens = _session(client)

    response = client.get(
        ME,
        headers={
            "Authorization": f"Bearer {_expired_access(tokens['id'])}",
            REFRESH_TOKEN_HEADER: tokens["refresh_token"],
        },
    )
    assert response.status_code == 200
    renewed = response.headers[RENEWED_ACCESS_TOKEN_HEADER]
    assert decode_token(renewed, TokenClass.ACCESS).subject == str(tokens["id"])

    # The refresh token is not rotated by a silent renewal
    rotated = client.post("/api/v1/users/refresh-token", json={"refresh_token": tokens["refresh_token"]})
    assert rotated.status_code == 200


def test_silent_refresh_needs_refresh_header(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SILENT_REFRESH", True)
    tokens = _session(client)
    response = client.get(ME, headers={"Authorization": f"Bearer {_expired_access(tokens['id'])}"})
    assert response.status_code == 403
    assert response.json()["message"] == "Failed to refresh token"


def test_silent_refresh_rejects_stale_refresh_token(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SILENT_REFRESH", True)
    tokens = _session(client)
    stale = create_refresh_token(tokens["id"])

    response = client.get(
        ME,
        headers={
            "Authorization": f"Bearer {_expired_access(tokens['id'])}",
            REFRESH_TOKEN_HEADER: stale,
        },
    )
    assert response.status_code == 403
    assert RENEWED_ACCESS_TOKEN_HEADER not in response.headers


def test_silent_refresh_rejects_other_users_refresh_token(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SILENT_REFRESH", True)
    tokens = _session(client)
    other = client.post(
        "/api/v1/users/register",
        json={"username": "carol", "email": "carol@example.com", "password": "secret123"},
    ).json()

    response = client.get(
        ME,
        headers={
            "Authorization": f"Bearer {_expired_access(tokens['id'])}",
            REFRESH_TOKEN_HEADER: other["refresh_token"],
        },
    )
    assert response.status_code == 403


def test_token_for_deleted_user_fails_closed(client, outbox, db):
    tokens = _session(client)
    db.query(User).filter(User.id == tokens["id"]).delete()
    db.commit()

    response = client.get(ME, headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized"


def test_error_envelope_shape(client):
    response = client.get(ME)
    body = response.json()
    assert set(body) >= {"success", "message", "kind", "path", "timestamp"}
    assert body["path"] == ME
