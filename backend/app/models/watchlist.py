"""Watchlist model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class WatchlistItem(Base):
    """Movie or TV show a user saved to watch later"""

    __tablename__ = "watchlist_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    media_id = Column(String(64), nullable=False)
    media_title = Column(String(255), nullable=False)
    poster_path = Column(String(512), nullable=False)
    media_type = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="watchlist_items")

    __table_args__ = (
        UniqueConstraint("user_id", "media_id", name="uq_watchlist_user_media"),
        Index("idx_watchlist_user_created", "user_id", "created_at"),
        CheckConstraint("media_type IN ('movie', 'tv')", name="chk_media_type"),
    )

    def __repr__(self):
        return f"<WatchlistItem(id={self.id}, user_id={self.user_id}, media_id='{self.media_id}')>"
