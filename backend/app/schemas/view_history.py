"""View history schemas"""

from pydantic import BaseModel, Field
from typing import List


class ViewActivityRequest(BaseModel):
    """Views to add to today's counters"""
    tv_shows_viewed: int = Field(0, ge=0, le=10000)
    movies_viewed: int = Field(0, ge=0, le=10000)


class WeeklyViewHistory(BaseModel):
    """Seven zero-filled days ending today, ready for charting"""
    labels: List[str]
    tv_shows_viewed_data: List[int]
    movies_viewed_data: List[int]


class TodayViewTotals(BaseModel):
    total_views: int
    tv_shows_viewed: int
    movies_viewed: int
