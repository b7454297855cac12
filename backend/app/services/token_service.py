"""Session token lifecycle - issuance onto the user record, rotation, revocation, verification."""

from __future__ import annotations

import hmac
import logging
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.database import commit_or_raise
from app.core.exceptions import ExpiredTokenError, InvalidTokenError
from app.core.security import (
    TokenClass,
    create_access_token,
    create_refresh_token,
    create_verification_token,
    decode_token,
)
from app.models.user import User

logger = logging.getLogger(__name__)


def _same_token(stored: Optional[str], presented: str) -> bool:
    return bool(stored) and hmac.compare_digest(stored, presented)


class TokenService:
    """Mint, store and invalidate the tokens mirrored on a user record."""

    @staticmethod
    def issue_session(db: Session, user: User, *, commit: bool = True) -> Tuple[str, str]:
        """
        Mint an access/refresh pair and make it the user's active session.

        Overwriting the stored refresh token invalidates every refresh token
        issued before.
        """
        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token(user.id)
        user.access_token = access_token
        user.refresh_token = refresh_token
        if commit:
            commit_or_raise(db, "issuing session tokens")
        return access_token, refresh_token

    @staticmethod
    def issue_verification_token(user: User) -> str:
        """Replace any pending verification token; only the newest one is live."""
        token = create_verification_token(user.id)
        user.verification_token = token
        return token

    @staticmethod
    def _load_refresh_owner(db: Session, refresh_token: str) -> User:
        """Resolve the user whose stored refresh token equals the presented one."""
        invalid = InvalidTokenError("Invalid refresh token", status_code=401)
        try:
            claims = decode_token(refresh_token, TokenClass.REFRESH)
            user_id = int(claims.subject)
        except (InvalidTokenError, ExpiredTokenError, ValueError):
            raise invalid

        user = db.get(User, user_id)
        if not user or not _same_token(user.refresh_token, refresh_token):
            logger.warning("Rejected refresh token for subject %s", claims.subject)
            raise invalid
        return user

    @staticmethod
    def rotate_refresh_token(db: Session, refresh_token: str) -> Tuple[User, str, str]:
        """
        Exchange a live refresh token for a new access/refresh pair.

        Raises:
            InvalidTokenError: (401) bad signature, expired, or not the stored token
        """
        user = TokenService._load_refresh_owner(db, refresh_token)
        access_token, new_refresh_token = TokenService.issue_session(db, user)
        logger.info(f"Rotated refresh token for user {user.id}")
        return user, access_token, new_refresh_token

    @staticmethod
    def renew_access_token(db: Session, refresh_token: str, expected_user_id: int) -> Tuple[User, str]:
        """
        Mint a new access token from a live refresh token without rotating it.

        Used by the auth gate when an access token has expired mid-session.
        The refresh token must belong to the same user as the expired token.
        """
        user = TokenService._load_refresh_owner(db, refresh_token)
        if user.id != expected_user_id:
            logger.warning(
                "Refresh token subject %s does not match access token subject %s",
                user.id,
                expected_user_id,
            )
            raise InvalidTokenError("Invalid refresh token", status_code=401)

        access_token = create_access_token(user.id)
        user.access_token = access_token
        commit_or_raise(db, "renewing access token")
        logger.info(f"Silently renewed access token for user {user.id}")
        return user, access_token

    @staticmethod
    def revoke_session(db: Session, user: User) -> None:
        """Clear the stored tokens; the refresh token stops working immediately."""
        user.access_token = None
        user.refresh_token = None
        commit_or_raise(db, "revoking session")
        logger.info(f"Revoked session for user {user.id}")

    @staticmethod
    def consume_verification_token(db: Session, token: str) -> User:
        """
        Mark the owner's email verified and clear the token in one conditional UPDATE.

        A forged, expired, replaced or already consumed token all fail the same way.
        """
        invalid = InvalidTokenError("Invalid or expired token.")
        try:
            claims = decode_token(token, TokenClass.VERIFY)
            user_id = int(claims.subject)
        except (InvalidTokenError, ExpiredTokenError, ValueError):
            raise invalid

        result = db.execute(
            update(User)
            .where(User.id == user_id, User.verification_token == token)
            .values(email_verified=True, verification_token=None)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            logger.warning(f"Verification token rejected for user {user_id}")
            raise invalid

        commit_or_raise(db, "verifying email")

        user = db.get(User, user_id)
        if user is not None:
            db.refresh(user)
        logger.info(f"Email verified for user {user_id}")
        return user


token_service = TokenService()
