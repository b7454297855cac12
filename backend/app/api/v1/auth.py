"""Authentication routes - registration, verification, login, refresh, logout"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from typing import Optional
from urllib.parse import quote
import json

from app.core.database import get_db
from app.config import settings
from app.core.exceptions import ValidationError
from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    GoogleLoginRequest,
    RefreshTokenRequest,
    AuthResponse,
    TokenResponse,
    UserResponse,
)
from app.schemas.response import APIResponse
from app.services.user_service import user_service
from app.services.token_service import token_service
from app.services.rate_limiter import enforce_login_limit, enforce_refresh_limit
from app.api.deps import protect
from app.models.user import User

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _auth_response(
    user: User,
    access_token: str,
    refresh_token: Optional[str],
    is_new_user: bool,
    message: Optional[str] = None,
) -> AuthResponse:
    return AuthResponse(
        **user.to_dict(),
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        is_new_user=is_new_user,
        message=message,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a local account and send the verification email

    Args:
        data: Username, email, password and optional avatar
        db: Database session

    Returns:
        Created user with its session tokens
    """
    user, access_token, refresh_token = user_service.register_user(db, data)
    return _auth_response(
        user,
        access_token,
        refresh_token,
        is_new_user=True,
        message="Registration successful. Please check your email to verify your account.",
    )


@router.get("/verify-email")
def verify_email(
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Consume an email verification token

    Redirects to EMAIL_VERIFICATION_REDIRECT_URL when configured, otherwise
    answers with JSON.
    """
    if not token or not token.strip():
        raise ValidationError("Token is missing")

    user = token_service.consume_verification_token(db, token.strip())
    payload = {
        "success": True,
        "message": "Email verified successfully!",
        "user": UserResponse.from_user(user).model_dump(),
    }

    if settings.EMAIL_VERIFICATION_REDIRECT_URL:
        target = f"{settings.EMAIL_VERIFICATION_REDIRECT_URL}?data={quote(json.dumps(payload))}"
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
    return payload


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Login endpoint - check credentials and start a new session

    Any previously issued refresh token stops working.
    """
    enforce_login_limit(_client_ip(request), credentials.email or "")

    user, access_token, refresh_token = user_service.authenticate_user(
        db, credentials.email, credentials.password
    )
    return _auth_response(user, access_token, refresh_token, is_new_user=False)


@router.post("/google-login", response_model=AuthResponse)
def google_login(
    data: GoogleLoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Sign in with Google; creates the account on first use (201)
    """
    user, access_token, refresh_token, is_new_user = user_service.social_login(db, data)
    response.status_code = status.HTTP_201_CREATED if is_new_user else status.HTTP_200_OK
    return _auth_response(user, access_token, refresh_token, is_new_user=is_new_user)


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(
    req: RefreshTokenRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Exchange the current refresh token for a new token pair
    """
    enforce_refresh_limit(_client_ip(request))

    _, access_token, refresh_token_value = token_service.rotate_refresh_token(db, req.refresh_token)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token_value,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/logout", response_model=APIResponse)
def logout(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Logout endpoint - clear the stored session tokens
    """
    token_service.revoke_session(db, current_user)
    return APIResponse(message="Logged out successfully")
