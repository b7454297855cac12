"""User model"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class User(Base):
    """User account, its credentials and the currently active session tokens"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # NULL for social-only accounts
    avatar = Column(String(512), nullable=True)
    email_verified = Column(Boolean, default=False, nullable=False)

    # Social login descriptor
    social_provider = Column(String(20), nullable=True)
    social_provider_id = Column(String(255), nullable=True)

    # Active session; cleared on logout, overwritten on login/refresh
    access_token = Column(String(1024), nullable=True)
    refresh_token = Column(String(1024), nullable=True)
    # Single-use; cleared once consumed
    verification_token = Column(String(1024), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    last_login = Column(DateTime(timezone=True))

    # Relationships
    favorite_genres = relationship(
        "FavoriteGenre",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="FavoriteGenre.id",
    )
    watchlist_items = relationship("WatchlistItem", back_populates="user", cascade="all, delete-orphan")
    liked_movies = relationship("LikedMovie", back_populates="user", cascade="all, delete-orphan")
    view_history = relationship("ViewHistory", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "social_provider IS NULL OR social_provider IN ('google', 'facebook')",
            name="chk_social_provider",
        ),
        Index("idx_users_social", "social_provider", "social_provider_id"),
    )

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"

    def to_dict(self):
        """Public fields only"""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "avatar": self.avatar,
            "email_verified": self.email_verified,
            "favorite_genres": [genre.to_dict() for genre in self.favorite_genres],
        }


class FavoriteGenre(Base):
    """Genre a user marked as favorite, unique by genre id per user"""

    __tablename__ = "favorite_genres"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    genre_id = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)

    user = relationship("User", back_populates="favorite_genres")

    __table_args__ = (
        UniqueConstraint("user_id", "genre_id", name="uq_user_genre"),
    )

    def __repr__(self):
        return f"<FavoriteGenre(user_id={self.user_id}, genre_id={self.genre_id}, name='{self.name}')>"

    def to_dict(self):
        return {"id": self.genre_id, "name": self.name}
