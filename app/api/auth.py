"""Authentication API endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import Identity, get_auth_service, get_current_identity
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    ResetPasswordRequest,
)
from app.schemas.common import MessageResponse
from app.services.auth import AuthService
from app.services.errors import InvalidCredentialsError, InvalidTokenError

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])

PASSWORD_RESET_PENDING = "Password reset functionality not implemented yet"


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate a user and return access and refresh tokens."""
    try:
        tokens, user = await auth_service.login(credentials.username, credentials.password)
    except InvalidCredentialsError:
        # Unknown user, wrong password and disabled account look identical
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user_id=user.id,
        username=user.username,
        email=user.email,
        expires_in=tokens.expires_in,
    )


@router.post("/refresh-token", response_model=RefreshTokenResponse)
async def refresh_token(
    body: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange a refresh token for a new token pair."""
    try:
        tokens = await auth_service.refresh(body.refresh_token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    return RefreshTokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Log out. Issued tokens stay valid until they expire."""
    await auth_service.logout()
    return MessageResponse(message="Logged out successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(body: Optional[ForgotPasswordRequest] = None):
    return MessageResponse(message=PASSWORD_RESET_PENDING)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: Optional[ResetPasswordRequest] = None):
    return MessageResponse(message=PASSWORD_RESET_PENDING)
