"""User service - handles account lifecycle and authentication"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, defer
from typing import List, Optional, Tuple
from datetime import datetime, timezone
from app.config import settings
from app.models.user import User, FavoriteGenre
from app.schemas.user import (
    RegisterRequest,
    GoogleLoginRequest,
    ChangePasswordRequest,
    UpdateProfileRequest,
    GenreItem,
)
from app.core.database import commit_or_raise
from app.core.security import MAX_PASSWORD_BYTES, get_password_hash, verify_password, create_access_token
from app.core.exceptions import (
    ValidationError,
    ConflictError,
    AuthenticationError,
    DependencyError,
    InvalidCredentialsError,
)
from app.services.token_service import token_service
from app.services.mail_service import mail_dispatcher, build_verification_email, redact_email
import logging
import re

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 6


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _check_username(username: str) -> None:
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")


def _check_email(email: str) -> None:
    if len(email) > 255 or not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


class UserService:
    """Service for account lifecycle operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int, include_password: bool = True) -> Optional[User]:
        """Get user by ID; the password hash is left unloaded unless requested"""
        query = db.query(User).filter(User.id == user_id)
        if not include_password:
            query = query.options(defer(User.password_hash))
        return query.first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        return db.query(User).filter(User.email == _clean(email).lower()).first()

    @staticmethod
    def register_user(db: Session, data: RegisterRequest) -> Tuple[User, str, str]:
        """
        Register a local account and send the verification email

        Args:
            db: Database session
            data: Registration input

        Returns:
            Created user, access token, refresh token

        Raises:
            ValidationError: Missing or malformed input
            ConflictError: Email already registered
            DependencyError: Verification email could not be sent
        """
        username = _clean(data.username)
        email = _clean(data.email).lower()
        password = data.password or ""

        if not username or not email or not password.strip():
            raise ValidationError("Username, Email, Password are required")
        _check_username(username)
        _check_email(email)
        _check_password(password)

        if UserService.get_user_by_email(db, email):
            raise ConflictError("User already exists")

        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            avatar=_clean(data.avatar) or None,
            email_verified=False,
        )
        db.add(user)
        try:
            db.flush()  # assigns user.id; a racing insert trips the unique index here
        except IntegrityError:
            db.rollback()
            raise ConflictError("User already exists")

        access_token, refresh_token = token_service.issue_session(db, user, commit=False)
        verification_token = token_service.issue_verification_token(user)
        verification_url = settings.get_verification_url(verification_token)

        try:
            mail_dispatcher.send(build_verification_email(email, verification_url))
        except DependencyError:
            db.rollback()
            logger.error(f"Registration rolled back, verification email failed for {redact_email(email)}")
            raise

        try:
            commit_or_raise(db, "registering user")
        except IntegrityError:
            raise ConflictError("User already exists")
        db.refresh(user)

        logger.info(f"Registered user {user.id} ({redact_email(email)})")
        return user, access_token, refresh_token

    @staticmethod
    def authenticate_user(db: Session, email: Optional[str], password: Optional[str]) -> Tuple[User, str, str]:
        """
        Check local credentials and start a new session

        Unknown email, social-only account and wrong password all raise the
        same InvalidCredentialsError.
        """
        email = _clean(email).lower()
        if not email or not (password or "").strip():
            raise ValidationError("Email and password are required")

        user = UserService.get_user_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for {redact_email(email)}")
            raise InvalidCredentialsError()

        user.last_login = datetime.now(timezone.utc)
        access_token, refresh_token = token_service.issue_session(db, user)

        logger.info(f"User {user.id} logged in")
        return user, access_token, refresh_token

    @staticmethod
    def social_login(db: Session, data: GoogleLoginRequest) -> Tuple[User, str, str, bool]:
        """
        Sign in with an identity asserted by Google

        Returns:
            User, access token, refresh token, whether the account was created
        """
        email = _clean(data.email).lower()
        google_id = _clean(data.google_id)
        if not email or not google_id:
            raise ValidationError("Email and Google ID are required")
        _check_email(email)
        avatar = _clean(data.avatar) or None

        user = UserService.get_user_by_email(db, email)
        is_new_user = user is None

        if user:
            user.social_provider = "google"
            user.social_provider_id = google_id
            if avatar:
                user.avatar = avatar
        else:
            user = User(
                username=UserService._social_username(data.name, email),
                email=email,
                password_hash=None,
                avatar=avatar,
                email_verified=True,  # the identity provider vouches for the address
                social_provider="google",
                social_provider_id=google_id,
            )
            db.add(user)
            try:
                db.flush()
            except IntegrityError:
                db.rollback()
                raise ConflictError("User already exists")

        user.last_login = datetime.now(timezone.utc)
        try:
            access_token, refresh_token = token_service.issue_session(db, user)
        except IntegrityError:
            raise ConflictError("User already exists")

        logger.info(f"Google login for user {user.id} (new={is_new_user})")
        return user, access_token, refresh_token, is_new_user

    @staticmethod
    def _social_username(name: Optional[str], email: str) -> str:
        username = _clean(name)[:MAX_USERNAME_LENGTH]
        if len(username) >= MIN_USERNAME_LENGTH:
            return username
        local_part = email.split("@", 1)[0][:MAX_USERNAME_LENGTH - 5]
        return local_part if len(local_part) >= MIN_USERNAME_LENGTH else f"{local_part}_user"

    @staticmethod
    def change_password(db: Session, user: User, data: ChangePasswordRequest) -> None:
        """Replace the password after checking the current one"""
        if not (data.old_password or "").strip() or not (data.new_password or "").strip():
            raise ValidationError("Old password and new password are required")
        _check_password(data.new_password)

        if not verify_password(data.old_password, user.password_hash):
            logger.warning(f"Password change rejected for user {user.id}")
            raise AuthenticationError("Invalid old password")

        # TODO: rotate the stored session tokens here once clients handle re-login after a password change
        user.password_hash = get_password_hash(data.new_password)
        commit_or_raise(db, "changing password")
        logger.info(f"Password changed for user {user.id}")

    @staticmethod
    def update_profile(db: Session, user: User, data: UpdateProfileRequest) -> Tuple[User, str]:
        """Update username, email and avatar; returns the user and a fresh access token"""
        if data.username is not None:
            username = _clean(data.username)
            _check_username(username)
            user.username = username

        if data.email is not None:
            email = _clean(data.email).lower()
            _check_email(email)
            if email != user.email:
                owner = UserService.get_user_by_email(db, email)
                if owner and owner.id != user.id:
                    raise ConflictError("Email already in use")
                user.email = email

        if data.avatar is not None:
            user.avatar = _clean(data.avatar) or None

        access_token = create_access_token(user.id)
        user.access_token = access_token
        try:
            commit_or_raise(db, "updating profile")
        except IntegrityError:
            raise ConflictError("Email already in use")
        db.refresh(user)

        logger.info(f"Updated profile for user {user.id}")
        return user, access_token

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """Delete the account and everything that belongs to it"""
        user_id = user.id
        db.delete(user)
        commit_or_raise(db, "deleting user")
        logger.info(f"Deleted user {user_id}")

    @staticmethod
    def get_favorite_genres(user: User) -> List[FavoriteGenre]:
        return list(user.favorite_genres)

    @staticmethod
    def add_favorite_genres(db: Session, user: User, genres: List[GenreItem]) -> List[FavoriteGenre]:
        """
        Add genres the user does not have yet

        Genres are unique by id; repeated ids, in the request or already
        stored, are skipped.
        """
        if not genres:
            raise ValidationError("Please provide genres to add.")

        known_ids = {genre.genre_id for genre in user.favorite_genres}
        for genre in genres:
            if genre.id in known_ids:
                continue
            user.favorite_genres.append(FavoriteGenre(genre_id=genre.id, name=genre.name))
            known_ids.add(genre.id)

        try:
            commit_or_raise(db, "adding favorite genres")
        except IntegrityError:
            raise ConflictError("Genre already in favorites")
        db.refresh(user)
        return list(user.favorite_genres)

    @staticmethod
    def remove_favorite_genre(db: Session, user: User, genre_id: int) -> List[FavoriteGenre]:
        """Remove a genre by id; removing an absent genre is a no-op"""
        for genre in list(user.favorite_genres):
            if genre.genre_id == genre_id:
                user.favorite_genres.remove(genre)
        commit_or_raise(db, "removing favorite genre")
        db.refresh(user)
        return list(user.favorite_genres)


# Singleton instance
user_service = UserService()
