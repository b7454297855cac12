"""Watchlist routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.watchlist import WatchlistAddRequest, WatchlistItemResponse, WatchlistPage, Pagination
from app.schemas.response import APIResponse
from app.services.watchlist_service import watchlist_service
from app.api.deps import protect
from app.models.user import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    data: WatchlistAddRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Add a movie or TV show to the watchlist

    Args:
        data: Media id, title, poster and type
        current_user: Current authenticated user
        db: Database session

    Returns:
        Created watchlist entry
    """
    item, message = watchlist_service.add_item(db, current_user.id, data)
    return {
        "success": True,
        "message": message,
        "data": WatchlistItemResponse.model_validate(item),
    }


@router.get("", response_model=WatchlistPage)
def get_watchlist(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Get the watchlist, newest first, one page at a time"""
    items, pagination = watchlist_service.list_items(db, current_user.id, page, limit)
    return WatchlistPage(
        data=[WatchlistItemResponse.model_validate(item) for item in items],
        pagination=Pagination(**pagination),
    )


@router.get("/count")
def get_watchlist_count(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    return {"success": True, "count": watchlist_service.count_items(db, current_user.id)}


@router.get("/{media_id}")
def check_watchlist(
    media_id: str,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Whether the media is on the watchlist"""
    item = watchlist_service.find_item(db, current_user.id, media_id)
    return {"success": True, "in_watchlist": item is not None}


@router.delete("/{media_id}", response_model=APIResponse)
def remove_from_watchlist(
    media_id: str,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    watchlist_service.remove_item(db, current_user.id, media_id)
    return APIResponse(message="Removed from watchlist")
