"""Business logic services."""
from app.services.auth import AuthService
from app.services.role_cache import RoleNameCache
from app.services.tokens import TokenCodec, TokenDetails
from app.services.users import UserRepository

__all__ = [
    "AuthService",
    "RoleNameCache",
    "TokenCodec",
    "TokenDetails",
    "UserRepository",
]
