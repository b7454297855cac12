"""Liked movie schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class LikeMovieRequest(BaseModel):
    movie_id: str = Field(..., min_length=1, max_length=64)


class LikedMovieResponse(BaseModel):
    movie_id: str
    liked_at: Optional[datetime]

    class Config:
        from_attributes = True
