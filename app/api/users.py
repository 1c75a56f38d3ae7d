"""User administration API endpoints."""
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import Identity, get_current_identity, get_user_repository, require_admin
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    DeleteUsersRequest,
    UserCreate,
    UserResponse,
    UserSelfUpdate,
    UserUpdate,
)
from app.services.errors import DuplicateUserError, RoleNotFoundError, UserNotFoundError
from app.services.users import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

DUPLICATE_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already exists",
}

# Columns that may not be cleared with an explicit null
NON_NULLABLE_FIELDS = ("first_name", "last_name", "role_id", "is_active")


def parse_user_id(user_id: str) -> str:
    """Normalize a path id to canonical UUID text, or 400."""
    try:
        return str(UUID(user_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format"
        )


def collect_changes(body: UserSelfUpdate) -> dict:
    """Column values for the fields present in ``body``."""
    changes = body.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]
    if changes.get("role_id") is not None:
        changes["role_id"] = str(changes["role_id"])
    return changes


async def ensure_role_exists(users: UserRepository, role_id: str) -> None:
    try:
        await users.get_role_by_id(role_id)
    except RoleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid role"
        )


async def load_user(users: UserRepository, user_id: str) -> User:
    try:
        return await users.get_by_id(user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )


# Self-service

@router.get("/me", response_model=UserResponse)
async def get_current_user(identity: Identity = Depends(get_current_identity)):
    """Get the current authenticated user's profile."""
    return UserResponse.model_validate(identity.user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    body: UserSelfUpdate,
    identity: Identity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repository)
):
    """Update own first name, last name and department."""
    user = identity.user
    try:
        await users.update(user, collect_changes(body))
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return UserResponse.model_validate(user)


# Administration

@router.get("", response_model=List[UserResponse])
async def get_all_users(
    _admin: Identity = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository)
):
    """List all users (admin only)."""
    return [UserResponse.model_validate(u) for u in await users.get_all()]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    admin: Identity = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository)
):
    """Create a new user (admin only)."""
    role_id = str(body.role_id)
    await ensure_role_exists(users, role_id)

    user = User(
        username=body.username,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        role_id=role_id,
        department=body.department,
        is_active=body.is_active,
    )
    try:
        user = await users.create(user, body.password)
    except DuplicateUserError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_MESSAGES.get(e.field, "User already exists")
        )

    logger.info(f"Admin {admin.user.username} created user {user.username}")
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_by_id(
    user_id: str,
    _admin: Identity = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository)
):
    """Get a user by ID (admin only)."""
    user = await load_user(users, parse_user_id(user_id))
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdate,
    admin: Identity = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository)
):
    """Update a user by ID, including role and active flag (admin only)."""
    user = await load_user(users, parse_user_id(user_id))

    if body.role_id is not None:
        await ensure_role_exists(users, str(body.role_id))

    changes = collect_changes(body)
    try:
        await users.update(user, changes)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    logger.info(f"Admin {admin.user.username} updated user {user.username}: {sorted(changes)}")
    return UserResponse.model_validate(user)


@router.delete("", response_model=MessageResponse)
async def delete_users(
    body: DeleteUsersRequest,
    admin: Identity = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository)
):
    """Delete multiple users by IDs (admin only)."""
    if not body.ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No user IDs provided"
        )

    await users.delete_many(str(i) for i in body.ids)
    logger.info(f"Admin {admin.user.username} deleted {len(body.ids)} users")
    return MessageResponse(message="Users deleted successfully")
