"""Authentication schemas."""
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Schema for user login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "password": "Pa55w0rd!"
            }
        }


class LoginResponse(BaseModel):
    """Token pair plus the identity it was issued to."""
    access_token: str
    refresh_token: str
    user_id: str
    username: str
    email: str
    expires_in: int


class RefreshTokenRequest(BaseModel):
    """Schema for exchanging a refresh token."""
    refresh_token: str = Field(..., min_length=1)


class RefreshTokenResponse(BaseModel):
    """Freshly minted token pair."""
    access_token: str
    refresh_token: str
    expires_in: int


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    new_password: Optional[str] = None
