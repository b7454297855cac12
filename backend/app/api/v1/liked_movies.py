"""Liked movies routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.schemas.liked_movie import LikeMovieRequest, LikedMovieResponse
from app.services.liked_movie_service import liked_movie_service
from app.api.deps import protect
from app.models.user import User

router = APIRouter()


def _likes(likes) -> list:
    return [LikedMovieResponse.model_validate(like) for like in likes]


@router.post("", status_code=status.HTTP_200_OK)
def add_liked_movie(
    data: LikeMovieRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Like a movie

    Returns:
        Confirmation and the updated list of likes
    """
    likes = liked_movie_service.like(db, current_user.id, data.movie_id.strip())
    return {
        "message": "Movie added to liked",
        "is_liked": True,
        "likes": _likes(likes),
    }


@router.get("", response_model=List[LikedMovieResponse])
def get_liked_movies(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    return _likes(liked_movie_service.list_likes(db, current_user.id))


@router.get("/{movie_id}")
def is_movie_liked(
    movie_id: str,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    return {"is_liked": liked_movie_service.find_like(db, current_user.id, movie_id) is not None}


@router.delete("/{movie_id}", status_code=status.HTTP_200_OK)
def remove_liked_movie(
    movie_id: str,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Remove a movie from the liked list"""
    likes = liked_movie_service.unlike(db, current_user.id, movie_id)
    return {
        "success": True,
        "message": "Movie removed from liked list",
        "likes": _likes(likes),
    }
