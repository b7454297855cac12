"""API dependencies - request authentication gate"""

from dataclasses import dataclass
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.config import settings
from app.core.database import get_db
from app.core.security import TokenClass, decode_token
from app.core.exceptions import ExpiredTokenError, Forbidden, InvalidTokenError, Unauthenticated
from app.models.user import User
from app.services.token_service import token_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

REFRESH_TOKEN_HEADER = "X-Refresh-Token"
RENEWED_ACCESS_TOKEN_HEADER = "X-Access-Token"

# HTTP Bearer token scheme; missing credentials are reported by authenticate()
security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Outcome of authenticating one request"""
    user: Optional[User]
    refreshed: bool = False


def _silent_refresh(request: Request, response: Response, expired_token: str, db: Session) -> AuthContext:
    """
    Renew an expired access token from the X-Refresh-Token header

    The new access token is returned to the client in the X-Access-Token
    response header.
    """
    if not settings.AUTH_SILENT_REFRESH:
        raise Forbidden("Token expired")

    refresh_token = request.headers.get(REFRESH_TOKEN_HEADER)
    if not refresh_token:
        raise Forbidden("Failed to refresh token")

    try:
        expired_claims = decode_token(expired_token, TokenClass.ACCESS, verify_exp=False)
        user_id = int(expired_claims.subject)
        user, access_token = token_service.renew_access_token(db, refresh_token, user_id)
    except (InvalidTokenError, ExpiredTokenError, ValueError):
        raise Forbidden("Failed to refresh token")

    response.headers[RENEWED_ACCESS_TOKEN_HEADER] = access_token
    return AuthContext(user=user, refreshed=True)


def authenticate(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> AuthContext:
    """
    Authenticate the bearer token on the request

    Args:
        request: Incoming request
        response: Outgoing response (receives a renewed token, if any)
        credentials: HTTP Bearer credentials
        db: Database session

    Returns:
        AuthContext with the referenced user (None if the account is gone)

    Raises:
        Unauthenticated: No bearer token
        Forbidden: Token is invalid, or expired and could not be refreshed
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")

    token = credentials.credentials
    try:
        claims = decode_token(token, TokenClass.ACCESS)
        user_id = int(claims.subject)
    except ExpiredTokenError:
        return _silent_refresh(request, response, token, db)
    except (InvalidTokenError, ValueError):
        logger.warning("Rejected access token path=%s", request.url.path)
        raise Forbidden("Invalid token")

    user = user_service.get_user_by_id(db, user_id, include_password=False)
    return AuthContext(user=user)


def protect(auth: Optional[AuthContext] = Depends(authenticate)) -> User:
    """
    Require an authenticated user

    Raises:
        Unauthenticated: No user was attached by authenticate()
    """
    if auth is None or auth.user is None:
        raise Unauthenticated("Not authorized")
    if auth.refreshed:
        logger.info(f"User {auth.user.id} continued with a renewed access token")
    return auth.user
