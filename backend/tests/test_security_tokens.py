from datetime import timedelta

import pytest

from app.config import settings
from app.core.exceptions import ConfigurationError, ExpiredTokenError, InvalidTokenError
from app.core.security import (
    TokenClass,
    create_access_token,
    create_refresh_token,
    create_verification_token,
    decode_token,
    get_password_hash,
    verify_password,
)


def test_access_token_round_trip():
    token = create_access_token(7)
    claims = decode_token(token, TokenClass.ACCESS)
    assert claims.subject == "7"
    assert claims.token_class is TokenClass.ACCESS


def test_each_class_has_its_own_expiry_window():
    access = decode_token(create_access_token(1), TokenClass.ACCESS)
    refresh = decode_token(create_refresh_token(1), TokenClass.REFRESH)
    verify = decode_token(create_verification_token(1), TokenClass.VERIFY)
    assert access.expires_at < verify.expires_at < refresh.expires_at


def test_tokens_are_not_interchangeable_between_classes():
    refresh = create_refresh_token(3)
    verify = create_verification_token(3)
    with pytest.raises(InvalidTokenError):
        decode_token(refresh, TokenClass.ACCESS)
    with pytest.raises(InvalidTokenError):
        decode_token(verify, TokenClass.REFRESH)
    with pytest.raises(InvalidTokenError):
        decode_token(create_access_token(3), TokenClass.VERIFY)


def test_expired_token_is_reported_as_expired():
    token = create_access_token(5, expires_delta=timedelta(seconds=-30))
    with pytest.raises(ExpiredTokenError):
        decode_token(token, TokenClass.ACCESS)


def test_expired_token_subject_readable_without_exp_check():
    token = create_access_token(5, expires_delta=timedelta(seconds=-30))
    claims = decode_token(token, TokenClass.ACCESS, verify_exp=False)
    assert claims.subject == "5"


def test_tampered_token_is_invalid_not_expired():
    token = create_access_token(5)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    with pytest.raises(InvalidTokenError):
        decode_token(tampered, TokenClass.ACCESS)
    with pytest.raises(InvalidTokenError):
        decode_token("not-a-jwt", TokenClass.ACCESS)
    with pytest.raises(InvalidTokenError):
        decode_token("", TokenClass.ACCESS)


def test_tokens_issued_back_to_back_differ():
    assert create_refresh_token(9) != create_refresh_token(9)


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "REFRESH_TOKEN_SECRET", "")
    with pytest.raises(ConfigurationError):
        create_refresh_token(1)
    with pytest.raises(ConfigurationError):
        decode_token("anything", TokenClass.REFRESH)


def test_empty_user_id_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        create_access_token(None)
    with pytest.raises(ConfigurationError):
        create_verification_token("  ")


def test_password_hash_round_trip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_password_without_usable_hash():
    assert not verify_password("secret123", None)
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_verify_password_rejects_input_past_bcrypt_limit():
    hashed = get_password_hash("p" * 72)
    assert verify_password("p" * 72, hashed)
    assert not verify_password("p" * 73, hashed)
