"""Watchlist schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum


class MediaType(str, Enum):
    """Watchlist entries are either movies or TV shows"""
    MOVIE = "movie"
    TV = "tv"


class WatchlistAddRequest(BaseModel):
    """Add to watchlist request"""
    media_id: str = Field(..., min_length=1, max_length=64)
    media_title: str = Field(..., min_length=1, max_length=255)
    poster_path: str = Field(..., min_length=1, max_length=512)
    media_type: MediaType

    @field_validator('media_id', 'media_title')
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value must not be blank')
        return v


class WatchlistItemResponse(BaseModel):
    """Watchlist entry"""
    id: int
    media_id: str
    media_title: str
    poster_path: str
    media_type: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    current: int
    total: int
    total_items: int


class WatchlistPage(BaseModel):
    success: bool = True
    data: List[WatchlistItemResponse]
    pagination: Pagination
