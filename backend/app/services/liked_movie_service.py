"""Liked movies service"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.core.database import commit_or_raise
from app.core.exceptions import ConflictError, NotFoundError
from app.models.liked_movie import LikedMovie

logger = logging.getLogger(__name__)


class LikedMovieService:
    """Service for the movies a user liked"""

    @staticmethod
    def list_likes(db: Session, user_id: int) -> List[LikedMovie]:
        """Liked movies, most recent first"""
        return (
            db.query(LikedMovie)
            .filter(LikedMovie.user_id == user_id)
            .order_by(LikedMovie.liked_at.desc(), LikedMovie.id.desc())
            .all()
        )

    @staticmethod
    def find_like(db: Session, user_id: int, movie_id: str) -> Optional[LikedMovie]:
        return db.query(LikedMovie).filter(
            LikedMovie.user_id == user_id,
            LikedMovie.movie_id == movie_id
        ).first()

    @staticmethod
    def like(db: Session, user_id: int, movie_id: str) -> List[LikedMovie]:
        if LikedMovieService.find_like(db, user_id, movie_id):
            raise ConflictError("Movie already in liked list")

        db.add(LikedMovie(user_id=user_id, movie_id=movie_id))
        try:
            commit_or_raise(db, "liking movie")
        except IntegrityError:
            raise ConflictError("Movie already in liked list")

        logger.info(f"User {user_id} liked movie {movie_id}")
        return LikedMovieService.list_likes(db, user_id)

    @staticmethod
    def unlike(db: Session, user_id: int, movie_id: str) -> List[LikedMovie]:
        like = LikedMovieService.find_like(db, user_id, movie_id)
        if not like:
            raise NotFoundError("Movie not found in liked list")
        db.delete(like)
        commit_or_raise(db, "removing liked movie")

        logger.info(f"User {user_id} removed movie {movie_id} from liked list")
        return LikedMovieService.list_likes(db, user_id)


liked_movie_service = LikedMovieService()
