"""API dependencies for dependency injection."""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.models.role import ADMIN_ROLE_NAME
from app.models.user import User
from app.services.auth import AuthService
from app.services.errors import InvalidTokenError, RoleNotFoundError, UserNotFoundError
from app.services.role_cache import RoleNameCache
from app.services.tokens import TokenCodec
from app.services.users import UserRepository

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


@dataclass
class Identity:
    """Authenticated caller attached to the request."""
    user_id: str
    user: User
    role_name: str

    @property
    def is_admin(self) -> bool:
        return self.role_name == ADMIN_ROLE_NAME


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


# Service dependencies

@lru_cache()
def get_token_codec() -> TokenCodec:
    """Get the process-wide token codec built from settings."""
    settings = get_settings()
    return TokenCodec(
        secret=settings.jwt_secret,
        access_expires=settings.access_token_expires,
        refresh_expires=settings.refresh_token_expires,
    )


@lru_cache()
def get_role_cache() -> RoleNameCache:
    """Get the process-wide role name cache."""
    return RoleNameCache(get_settings().role_cache_ttl_seconds)


async def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(db)


async def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenCodec = Depends(get_token_codec)
) -> AuthService:
    """Get auth service instance."""
    return AuthService(users, tokens)


# Authentication dependencies

def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise unauthorized("Authorization header is required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_PREFIX or not parts[1]:
        raise unauthorized("Authorization header format must be Bearer {token}")
    return parts[1]


async def get_current_identity(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenCodec = Depends(get_token_codec),
    role_cache: RoleNameCache = Depends(get_role_cache)
) -> Identity:
    """Validate the bearer token and load the caller's user and role."""
    token = parse_bearer(request.headers.get("Authorization"))

    try:
        claims = tokens.validate(token)
    except InvalidTokenError:
        raise unauthorized("Invalid or expired token")

    try:
        user = await users.get_by_id(claims.sub)
    except UserNotFoundError:
        raise unauthorized("User not found")

    if not user.is_active:
        raise unauthorized("User account is disabled")

    role_name = role_cache.get(user.role_id)
    if role_name is None:
        try:
            role = await users.get_role_by_id(user.role_id)
        except (RoleNotFoundError, SQLAlchemyError) as e:
            logger.error(f"Could not load role {user.role_id} of user {user.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error fetching user role"
            )
        role_name = role.name
        role_cache.set(user.role_id, role_name)

    identity = Identity(user_id=user.id, user=user, role_name=role_name)
    request.state.identity = identity
    return identity


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Require the caller's role to be exactly Admin."""
    if not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin permission required"
        )
    return identity
