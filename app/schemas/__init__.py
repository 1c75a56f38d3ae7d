"""Pydantic schemas for API validation."""
from app.schemas.common import (
    ErrorResponse,
    MessageResponse,
)
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from app.schemas.user import (
    UserCreate,
    UserSelfUpdate,
    UserUpdate,
    DeleteUsersRequest,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserCreate",
    "UserSelfUpdate",
    "UserUpdate",
    "DeleteUsersRequest",
    "UserResponse",
]
