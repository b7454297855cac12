"""Liked movie model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class LikedMovie(Base):
    """Movie a user liked"""

    __tablename__ = "liked_movies"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = Column(String(64), nullable=False)
    liked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="liked_movies")

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_liked_user_movie"),
    )

    def __repr__(self):
        return f"<LikedMovie(user_id={self.user_id}, movie_id='{self.movie_id}')>"
