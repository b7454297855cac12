"""Security utilities - JWT minting/validation per token class, password hashing"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union
from jose import ExpiredSignatureError, JWTError, jwt
import bcrypt
from app.config import settings
from app.core.exceptions import ConfigurationError, ExpiredTokenError, InvalidTokenError
import logging
import secrets

logger = logging.getLogger(__name__)

# bcrypt only accepts up to 72 bytes of input
MAX_PASSWORD_BYTES = 72


class TokenClass(str, Enum):
    """Token classes; each one is signed with its own secret and expiry"""
    ACCESS = "access"
    REFRESH = "refresh"
    VERIFY = "verify"


@dataclass(frozen=True)
class TokenClaims:
    """Validated token contents"""
    subject: str
    expires_at: datetime
    token_class: TokenClass


def _secret_for(token_class: TokenClass) -> str:
    secret = {
        TokenClass.ACCESS: settings.ACCESS_TOKEN_SECRET,
        TokenClass.REFRESH: settings.REFRESH_TOKEN_SECRET,
        TokenClass.VERIFY: settings.VERIFY_TOKEN_SECRET,
    }[token_class]
    if not secret or not secret.strip():
        raise ConfigurationError(f"Signing secret for {token_class.value} tokens is not configured")
    return secret


def _expiry_for(token_class: TokenClass) -> timedelta:
    if token_class is TokenClass.ACCESS:
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    if token_class is TokenClass.REFRESH:
        return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return timedelta(minutes=settings.VERIFY_TOKEN_EXPIRE_MINUTES)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against its hash

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password (None for social-only accounts)

    Returns:
        bool: True if password matches
    """
    if not plain_password or not hashed_password:
        return False
    password_bytes = plain_password.encode('utf-8')
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        # Never stored: hashing rejects input past bcrypt's limit
        return False
    try:
        return bcrypt.checkpw(
            password_bytes,
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash is malformed")
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode('utf-8')


def create_token(
    user_id: Union[int, str, None],
    token_class: TokenClass,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a {sub, typ} claim set for the given token class

    Args:
        user_id: Subject of the token
        token_class: Which secret and expiry window to use
        expires_delta: Override of the configured expiry window

    Returns:
        str: Encoded JWT

    Raises:
        ConfigurationError: If the class secret is unset or user_id is empty
    """
    if user_id is None or not str(user_id).strip():
        raise ConfigurationError(f"User ID is required to generate {token_class.value} token")

    secret = _secret_for(token_class)
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else _expiry_for(token_class))

    to_encode: Dict[str, Any] = {
        "sub": str(user_id),
        "typ": token_class.value,
        "exp": expire,
        "iat": now,
        "jti": secrets.token_urlsafe(16),  # Unique token ID
    }
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(user_id: Union[int, str, None], expires_delta: Optional[timedelta] = None) -> str:
    return create_token(user_id, TokenClass.ACCESS, expires_delta)


def create_refresh_token(user_id: Union[int, str, None], expires_delta: Optional[timedelta] = None) -> str:
    return create_token(user_id, TokenClass.REFRESH, expires_delta)


def create_verification_token(user_id: Union[int, str, None], expires_delta: Optional[timedelta] = None) -> str:
    return create_token(user_id, TokenClass.VERIFY, expires_delta)


def decode_token(token: str, token_class: TokenClass, verify_exp: bool = True) -> TokenClaims:
    """
    Decode and verify a JWT of the given class

    Args:
        token: JWT token string
        token_class: Expected token class
        verify_exp: False reads the subject of an authentic but expired token

    Returns:
        TokenClaims: Subject and expiry

    Raises:
        ExpiredTokenError: Signature is valid but the token is past its expiry
        InvalidTokenError: Bad signature, malformed token or wrong token class
    """
    if not token:
        raise InvalidTokenError()

    secret = _secret_for(token_class)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": verify_exp},
        )
    except ExpiredSignatureError:
        raise ExpiredTokenError()
    except JWTError:
        raise InvalidTokenError()

    if payload.get("typ") != token_class.value:
        raise InvalidTokenError()

    subject = payload.get("sub")
    exp = payload.get("exp")
    if not subject or exp is None:
        raise InvalidTokenError()

    return TokenClaims(
        subject=str(subject),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        token_class=token_class,
    )
