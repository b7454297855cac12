from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from app.config import settings
from app.core.exceptions import DependencyError
from app.core.security import create_verification_token
from app.models.user import User
from app.services.mail_service import mail_dispatcher
from app.services.user_service import UserService

USERS = "/api/v1/users"


def _register(client, email="alice@example.com", password="secret123", username="alice"):
    return client.post(
        f"{USERS}/register",
        json={"username": username, "email": email, "password": password},
    )


def _login(client, email="alice@example.com", password="secret123"):
    return client.post(f"{USERS}/login", json={"email": email, "password": password})


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_register_then_login(client, outbox):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "alice@example.com"
    assert body["email_verified"] is False
    assert body["access_token"] and body["refresh_token"]
    assert "password_hash" not in body

    duplicate = _register(client)
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "User already exists"
    assert duplicate.json()["kind"] == "conflict"

    assert _login(client).status_code == 200

    wrong = _login(client, password="wrong-password")
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid email or password"


def test_unknown_email_and_wrong_password_look_the_same(client, outbox):
    _register(client)
    unknown = _login(client, email="nobody@example.com")
    wrong = _login(client, password="wrong-password")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["message"] == wrong.json()["message"]


def test_register_requires_all_fields(client, outbox):
    response = client.post(f"{USERS}/register", json={"email": "a@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Username, Email, Password are required"
    assert outbox == []


def test_register_sends_verification_link(client, outbox, db):
    _register(client)
    assert len(outbox) == 1
    message = outbox[0]
    assert message.to == "alice@example.com"
    assert message.subject == "Please Verify Your Email"

    stored = db.query(User).filter(User.email == "alice@example.com").one()
    assert stored.verification_token
    assert stored.verification_token in message.text


def test_mail_failure_rolls_back_registration(client, db, monkeypatch):
    def fail(message):
        raise DependencyError("Failed to send email")

    monkeypatch.setattr(mail_dispatcher, "send", fail)
    response = _register(client)
    assert response.status_code == 500
    assert response.json()["kind"] == "dependency"
    assert db.query(User).count() == 0


def test_verification_token_is_single_use(client, outbox, db):
    _register(client)
    token = parse_qs(urlparse(outbox[0].text.split(": ", 1)[1]).query)["token"][0]

    first = client.get(f"{USERS}/verify-email", params={"token": token})
    assert first.status_code == 200
    assert first.json()["message"] == "Email verified successfully!"
    assert first.json()["user"]["email_verified"] is True

    replay = client.get(f"{USERS}/verify-email", params={"token": token})
    assert replay.status_code == 400
    assert replay.json()["message"] == "Invalid or expired token."

    db.expire_all()
    stored = db.query(User).one()
    assert stored.email_verified is True
    assert stored.verification_token is None


def test_verify_email_without_token(client):
    response = client.get(f"{USERS}/verify-email")
    assert response.status_code == 400
    assert response.json()["message"] == "Token is missing"


def test_verify_email_redirects_when_configured(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_VERIFICATION_REDIRECT_URL", "http://localhost:3000/verified")
    _register(client)
    token = parse_qs(urlparse(outbox[0].text.split(": ", 1)[1]).query)["token"][0]

    response = client.get(f"{USERS}/verify-email", params={"token": token}, follow_redirects=False)
    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("http://localhost:3000/verified?data=")
    assert "access_token" not in location


def test_refresh_rotates_and_old_refresh_stops_working(client, outbox):
    tokens = _register(client).json()

    rotated = client.post(f"{USERS}/refresh-token", json={"refresh_token": tokens["refresh_token"]})
    assert rotated.status_code == 200
    new_tokens = rotated.json()
    assert new_tokens["refresh_token"] != tokens["refresh_token"]

    stale = client.post(f"{USERS}/refresh-token", json={"refresh_token": tokens["refresh_token"]})
    assert stale.status_code == 401
    assert stale.json()["kind"] == "invalid_token"


def test_new_login_invalidates_previous_refresh_token(client, outbox):
    first = _register(client).json()
    _login(client)

    response = client.post(f"{USERS}/refresh-token", json={"refresh_token": first["refresh_token"]})
    assert response.status_code == 401


def test_logout_revokes_refresh_but_access_lives_until_expiry(client, outbox):
    tokens = _login_after_register(client)

    logout = client.post(f"{USERS}/logout", headers=_auth(tokens["access_token"]))
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully"

    refresh = client.post(f"{USERS}/refresh-token", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401

    me = client.get(f"{USERS}/me", headers=_auth(tokens["access_token"]))
    assert me.status_code == 200


def test_access_token_cannot_be_used_as_refresh_token(client, outbox):
    tokens = _register(client).json()
    response = client.post(f"{USERS}/refresh-token", json={"refresh_token": tokens["access_token"]})
    assert response.status_code == 401


def test_google_login_creates_then_links_account(client):
    payload = {"email": "gina@example.com", "name": "Gina", "google_id": "g-123", "avatar": "https://img/g.png"}

    created = client.post(f"{USERS}/google-login", json=payload)
    assert created.status_code == 201
    assert created.json()["is_new_user"] is True
    assert created.json()["email_verified"] is True

    again = client.post(f"{USERS}/google-login", json=payload)
    assert again.status_code == 200
    assert again.json()["is_new_user"] is False
    assert again.json()["id"] == created.json()["id"]


def test_google_account_cannot_password_login(client):
    client.post(f"{USERS}/google-login", json={"email": "gina@example.com", "google_id": "g-123"})
    response = _login(client, email="gina@example.com", password="anything")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_google_login_requires_email_and_id(client):
    response = client.post(f"{USERS}/google-login", json={"email": "gina@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email and Google ID are required"


def test_login_is_rate_limited(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "LOGIN_RATE_LIMIT_PER_MINUTE", 2)
    _register(client)
    assert _login(client, password="nope-nope").status_code == 401
    assert _login(client, password="nope-nope").status_code == 401
    blocked = _login(client)
    assert blocked.status_code == 429
    assert blocked.json()["kind"] == "rate_limited"


def _login_after_register(client):
    _register(client)
    return _login(client).json()


def test_register_rejects_password_longer_than_bcrypt_accepts(client, outbox, db):
    response = _register(client, password="p" * 80)
    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert response.json()["message"] == "Password must be at most 72 bytes"
    assert db.query(User).count() == 0
    assert outbox == []


def test_register_counts_password_bytes_not_characters(client, outbox):
    # 25 three-byte characters: 25 characters, 75 bytes
    response = _register(client, password="€" * 25)
    assert response.status_code == 400
    assert response.json()["message"] == "Password must be at most 72 bytes"

    assert _register(client, password="p" * 72).status_code == 201


def test_racing_duplicate_registration_hits_unique_email(client, outbox, db, monkeypatch):
    assert _register(client).status_code == 201

    # The second request misses the pre-check, as if both checked before either inserted
    monkeypatch.setattr(UserService, "get_user_by_email", staticmethod(lambda db, email: None))
    response = _register(client, username="alice2")

    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"
    assert response.json()["kind"] == "conflict"
    db.expire_all()
    assert db.query(User).filter(User.email == "alice@example.com").count() == 1
    assert db.query(User).count() == 1
    assert len(outbox) == 1


def test_expired_verification_token_is_rejected(client, outbox, db):
    user_id = _register(client).json()["id"]
    expired = create_verification_token(user_id, expires_delta=timedelta(seconds=-1))
    user = db.query(User).filter(User.id == user_id).one()
    user.verification_token = expired
    db.commit()

    response = client.get(f"{USERS}/verify-email", params={"token": expired})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired token."

    db.expire_all()
    stored = db.query(User).filter(User.id == user_id).one()
    assert stored.email_verified is False
    assert stored.verification_token == expired
