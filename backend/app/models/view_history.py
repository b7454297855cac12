"""Per-day view history model"""

from sqlalchemy import Column, Integer, Date, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class ViewHistory(Base):
    """How many TV shows and movies a user viewed on one UTC calendar day"""

    __tablename__ = "view_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    tv_shows_viewed = Column(Integer, default=0, nullable=False)
    movies_viewed = Column(Integer, default=0, nullable=False)

    user = relationship("User", back_populates="view_history")

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_view_history_user_date"),
        CheckConstraint("tv_shows_viewed >= 0", name="chk_tv_shows_viewed"),
        CheckConstraint("movies_viewed >= 0", name="chk_movies_viewed"),
    )

    def __repr__(self):
        return f"<ViewHistory(user_id={self.user_id}, date={self.date})>"
