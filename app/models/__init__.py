"""Database models package."""
from app.models.role import Role, ADMIN_ROLE_NAME
from app.models.user import User

__all__ = [
    "Role",
    "ADMIN_ROLE_NAME",
    "User",
]
