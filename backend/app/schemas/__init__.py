"""Pydantic schemas for API validation"""

from app.schemas.user import (
    GenreItem,
    RegisterRequest,
    LoginRequest,
    GoogleLoginRequest,
    ChangePasswordRequest,
    UpdateProfileRequest,
    RefreshTokenRequest,
    FavoriteGenresRequest,
    UserResponse,
    AuthResponse,
    TokenResponse,
    FavoriteGenresResponse,
)
from app.schemas.watchlist import MediaType, WatchlistAddRequest, WatchlistItemResponse, WatchlistPage
from app.schemas.liked_movie import LikeMovieRequest, LikedMovieResponse
from app.schemas.view_history import ViewActivityRequest, WeeklyViewHistory, TodayViewTotals
from app.schemas.response import APIResponse, ErrorResponse, HealthResponse

__all__ = [
    "GenreItem", "RegisterRequest", "LoginRequest", "GoogleLoginRequest", "ChangePasswordRequest",
    "UpdateProfileRequest", "RefreshTokenRequest", "FavoriteGenresRequest",
    "UserResponse", "AuthResponse", "TokenResponse", "FavoriteGenresResponse",
    "MediaType", "WatchlistAddRequest", "WatchlistItemResponse", "WatchlistPage",
    "LikeMovieRequest", "LikedMovieResponse",
    "ViewActivityRequest", "WeeklyViewHistory", "TodayViewTotals",
    "APIResponse", "ErrorResponse", "HealthResponse",
]
