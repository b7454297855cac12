"""Watchlist service"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Tuple
import logging
import math

from app.core.database import commit_or_raise
from app.core.exceptions import ConflictError, NotFoundError
from app.models.watchlist import WatchlistItem
from app.schemas.watchlist import MediaType, WatchlistAddRequest

logger = logging.getLogger(__name__)


def _media_label(media_type: str) -> str:
    return "Movie" if media_type == MediaType.MOVIE.value else "TV show"


class WatchlistService:
    """Service for a user's watchlist"""

    @staticmethod
    def add_item(db: Session, user_id: int, data: WatchlistAddRequest) -> Tuple[WatchlistItem, str]:
        """
        Add a movie or TV show to the watchlist

        Returns:
            Created entry and a confirmation message
        """
        label = _media_label(data.media_type.value)
        if WatchlistService.find_item(db, user_id, data.media_id):
            raise ConflictError(f"{label} already in watchlist")

        item = WatchlistItem(
            user_id=user_id,
            media_id=data.media_id,
            media_title=data.media_title,
            poster_path=data.poster_path,
            media_type=data.media_type.value,
        )
        db.add(item)
        try:
            commit_or_raise(db, "adding to watchlist")
        except IntegrityError:
            raise ConflictError(f"{label} already in watchlist")
        db.refresh(item)

        logger.info(f"User {user_id} added {data.media_type.value} {data.media_id} to watchlist")
        return item, f"{label} added to watchlist"

    @staticmethod
    def find_item(db: Session, user_id: int, media_id: str):
        return db.query(WatchlistItem).filter(
            WatchlistItem.user_id == user_id,
            WatchlistItem.media_id == media_id
        ).first()

    @staticmethod
    def remove_item(db: Session, user_id: int, media_id: str) -> None:
        item = WatchlistService.find_item(db, user_id, media_id)
        if not item:
            raise NotFoundError("Media not found in watchlist")
        db.delete(item)
        commit_or_raise(db, "removing from watchlist")
        logger.info(f"User {user_id} removed {media_id} from watchlist")

    @staticmethod
    def list_items(db: Session, user_id: int, page: int, limit: int) -> Tuple[List[WatchlistItem], dict]:
        """
        Page through the watchlist, newest first

        Returns:
            Items on the page and pagination info {current, total, total_items}
        """
        query = db.query(WatchlistItem).filter(WatchlistItem.user_id == user_id)
        total_items = query.count()
        items = (
            query.order_by(WatchlistItem.created_at.desc(), WatchlistItem.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        pagination = {
            "current": page,
            "total": math.ceil(total_items / limit),
            "total_items": total_items,
        }
        return items, pagination

    @staticmethod
    def count_items(db: Session, user_id: int) -> int:
        return db.query(WatchlistItem).filter(WatchlistItem.user_id == user_id).count()


watchlist_service = WatchlistService()
