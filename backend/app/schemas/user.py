"""User and authentication schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


class GenreItem(BaseModel):
    """Favorite genre as exchanged with the client"""
    id: int
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Genre name must not be blank')
        return v


# Request bodies. Required-ness of credential fields is checked by the service
# so that blank input is reported as a 400 with a single message.
class RegisterRequest(BaseModel):
    """Local registration"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    avatar: Optional[str] = Field(None, max_length=512)


class LoginRequest(BaseModel):
    """Local login"""
    email: Optional[str] = None
    password: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    """Identity asserted by the Google sign-in flow on the client"""
    email: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = Field(None, max_length=512)
    google_id: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = Field(None, max_length=512)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class FavoriteGenresRequest(BaseModel):
    """Genres to add to the favorites list"""
    genres: List[GenreItem] = Field(default_factory=list)


# Responses
class UserResponse(BaseModel):
    """Public user fields"""
    id: int
    username: str
    email: str
    avatar: Optional[str] = None
    email_verified: bool
    favorite_genres: List[GenreItem] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(**user.to_dict())


class AuthResponse(UserResponse):
    """Public user fields plus the session tokens"""
    success: bool = True
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: int
    is_new_user: bool = False
    message: Optional[str] = None


class TokenResponse(BaseModel):
    """Rotated token pair"""
    success: bool = True
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class FavoriteGenresResponse(BaseModel):
    message: Optional[str] = None
    favorite_genres: List[GenreItem]
