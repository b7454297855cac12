"""Database models"""

from app.models.user import User, FavoriteGenre
from app.models.watchlist import WatchlistItem
from app.models.liked_movie import LikedMovie
from app.models.view_history import ViewHistory

__all__ = ["User", "FavoriteGenre", "WatchlistItem", "LikedMovie", "ViewHistory"]
