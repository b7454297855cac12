"""View history routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.view_history import ViewActivityRequest, WeeklyViewHistory, TodayViewTotals
from app.schemas.response import APIResponse
from app.services.view_history_service import view_history_service
from app.api.deps import protect
from app.models.user import User

router = APIRouter()


@router.post("", response_model=APIResponse)
def update_view_history(
    data: ViewActivityRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Add TV show and movie views to today's counters

    Args:
        data: Views to add
        current_user: Current authenticated user
        db: Database session
    """
    view_history_service.record_activity(db, current_user.id, data.tv_shows_viewed, data.movies_viewed)
    return APIResponse(message="Activity updated successfully")


@router.get("/weekly", response_model=WeeklyViewHistory)
def get_weekly_view_history(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Daily view counts for the last seven days, today included"""
    return view_history_service.weekly(db, current_user.id)


@router.get("/today", response_model=TodayViewTotals)
def get_total_view_count(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    row = view_history_service.today_activity(db, current_user.id)
    return TodayViewTotals(
        total_views=row.tv_shows_viewed + row.movies_viewed,
        tv_shows_viewed=row.tv_shows_viewed,
        movies_viewed=row.movies_viewed,
    )


@router.get("/today/tv")
def get_tv_show_view_count(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    row = view_history_service.today_activity(
        db, current_user.id, not_found_message="No TV show activity found for today."
    )
    return {"tv_shows_viewed": row.tv_shows_viewed}


@router.get("/today/movies")
def get_movie_view_count(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    row = view_history_service.today_activity(
        db, current_user.id, not_found_message="No movie activity found for today."
    )
    return {"movies_viewed": row.movies_viewed}
