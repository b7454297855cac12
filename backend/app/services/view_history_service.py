"""View history service - per-day view counters and weekly aggregation"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import date, datetime, timedelta, timezone
import logging

from app.core.database import commit_or_raise
from app.core.exceptions import NotFoundError
from app.models.view_history import ViewHistory

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ViewHistoryService:
    """Service for view-history analytics"""

    @staticmethod
    def _increment(db: Session, user_id: int, day: date, tv_shows_viewed: int, movies_viewed: int) -> int:
        result = db.execute(
            update(ViewHistory)
            .where(ViewHistory.user_id == user_id, ViewHistory.date == day)
            .values(
                tv_shows_viewed=ViewHistory.tv_shows_viewed + tv_shows_viewed,
                movies_viewed=ViewHistory.movies_viewed + movies_viewed,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def record_activity(
        db: Session,
        user_id: int,
        tv_shows_viewed: int,
        movies_viewed: int,
        today: Optional[date] = None,
    ) -> None:
        """
        Add views to today's counters, creating today's row if needed

        Args:
            db: Database session
            user_id: User ID
            tv_shows_viewed: TV shows to add
            movies_viewed: Movies to add
            today: Day to record on (defaults to the current UTC day)
        """
        day = today or utc_today()

        if ViewHistoryService._increment(db, user_id, day, tv_shows_viewed, movies_viewed) == 0:
            db.add(ViewHistory(
                user_id=user_id,
                date=day,
                tv_shows_viewed=tv_shows_viewed,
                movies_viewed=movies_viewed,
            ))
            try:
                commit_or_raise(db, "recording view activity")
            except IntegrityError:
                # Another request created today's row first
                ViewHistoryService._increment(db, user_id, day, tv_shows_viewed, movies_viewed)
                commit_or_raise(db, "recording view activity")
        else:
            commit_or_raise(db, "recording view activity")

        logger.info(f"Recorded views for user {user_id} on {day}: tv={tv_shows_viewed} movies={movies_viewed}")

    @staticmethod
    def weekly(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, List]:
        """
        Daily counts for the seven days ending today, zero-filled

        Returns:
            {labels, tv_shows_viewed_data, movies_viewed_data} in ascending date order
        """
        day = today or utc_today()
        start = day - timedelta(days=WEEK_DAYS - 1)

        rows = db.query(ViewHistory).filter(
            ViewHistory.user_id == user_id,
            ViewHistory.date >= start,
            ViewHistory.date <= day
        ).all()
        by_day = {row.date: row for row in rows}

        graph = {"labels": [], "tv_shows_viewed_data": [], "movies_viewed_data": []}
        for offset in range(WEEK_DAYS):
            current = start + timedelta(days=offset)
            row = by_day.get(current)
            graph["labels"].append(current.isoformat())
            graph["tv_shows_viewed_data"].append(row.tv_shows_viewed if row else 0)
            graph["movies_viewed_data"].append(row.movies_viewed if row else 0)
        return graph

    @staticmethod
    def today_activity(
        db: Session,
        user_id: int,
        not_found_message: str = "No activity found for today.",
        today: Optional[date] = None,
    ) -> ViewHistory:
        """Today's row, or NotFoundError when nothing was recorded today"""
        day = today or utc_today()
        row = db.query(ViewHistory).filter(
            ViewHistory.user_id == user_id,
            ViewHistory.date == day
        ).first()
        if not row:
            raise NotFoundError(not_found_message)
        return row


view_history_service = ViewHistoryService()
