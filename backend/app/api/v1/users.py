"""User profile routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.core.database import get_db
from app.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    FavoriteGenresRequest,
    FavoriteGenresResponse,
    GenreItem,
    UpdateProfileRequest,
    UserResponse,
)
from app.schemas.response import APIResponse
from app.services.user_service import user_service
from app.api.deps import protect
from app.models.user import User

router = APIRouter()


def _genres(favorites) -> list:
    return [GenreItem(**genre.to_dict()) for genre in favorites]


@router.get("/me", response_model=UserResponse)
def get_my_profile(
    current_user: User = Depends(protect)
):
    """
    Get current user profile

    Args:
        current_user: Current authenticated user

    Returns:
        User profile
    """
    return UserResponse.from_user(current_user)


@router.put("/update-profile", response_model=AuthResponse)
def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Update username, email or avatar

    Returns:
        Updated profile and a fresh access token
    """
    user, access_token = user_service.update_profile(db, current_user, data)
    return AuthResponse(
        **user.to_dict(),
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.delete("/delete-user", response_model=APIResponse)
def delete_user(
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Delete the current account"""
    user_service.delete_user(db, current_user)
    return APIResponse(message="User deleted successfully!")


@router.put("/change-password", response_model=APIResponse)
def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """Change the password of the current account"""
    user_service.change_password(db, current_user, data)
    return APIResponse(message="Password changed successfully!")


@router.get("/favorite-genres", response_model=FavoriteGenresResponse)
def get_favorite_genres(
    current_user: User = Depends(protect)
):
    return FavoriteGenresResponse(favorite_genres=_genres(user_service.get_favorite_genres(current_user)))


@router.post("/favorite-genres", response_model=FavoriteGenresResponse)
def add_favorite_genres(
    data: FavoriteGenresRequest,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    """
    Add favorite genres; ids already present are skipped
    """
    favorites = user_service.add_favorite_genres(db, current_user, data.genres)
    return FavoriteGenresResponse(
        message="Favorite genres updated successfully.",
        favorite_genres=_genres(favorites),
    )


@router.delete("/favorite-genres/{genre_id}", response_model=FavoriteGenresResponse)
def delete_favorite_genre(
    genre_id: int,
    current_user: User = Depends(protect),
    db: Session = Depends(get_db)
):
    favorites = user_service.remove_favorite_genre(db, current_user, genre_id)
    return FavoriteGenresResponse(
        message="Genre deleted successfully",
        favorite_genres=_genres(favorites),
    )
