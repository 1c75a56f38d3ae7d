"""User and role persistence."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.models.role import Role
from app.models.user import User
from app.services.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    RoleNotFoundError,
    UserDisabledError,
    UserNotFoundError,
)
from app.services.passwords import dummy_verify, hash_password, verify_password

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
UNIQUE_FIELDS = ("username", "email")


def _unique_violation_field(exc: IntegrityError) -> Optional[str]:
    """
    Identify which unique column an IntegrityError refers to.

    Returns "username", "email", "" for a unique violation on an unknown
    constraint, or None when the error is not a unique violation at all.
    """
    orig = exc.orig
    cause = getattr(orig, "__cause__", None)
    message = str(orig).lower()

    sqlstate = (
        getattr(orig, "sqlstate", None)
        or getattr(orig, "pgcode", None)
        or getattr(cause, "sqlstate", None)
    )
    if sqlstate:
        if sqlstate != UNIQUE_VIOLATION:
            return None
    elif "unique" not in message and "duplicate key" not in message:
        return None

    # asyncpg exposes the violated constraint by name
    constraint = getattr(cause, "constraint_name", None) or getattr(orig, "constraint_name", None)
    haystack = constraint.lower() if constraint else message
    for field in UNIQUE_FIELDS:
        if field in haystack:
            return field
    return ""


class UserRepository:
    """The only component that talks to the users and roles tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> User:
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(details=user_id)
        return user

    async def get_by_username(self, username: str) -> User:
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(details=username)
        return user

    async def get_all(self) -> List[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at, User.username)
        )
        return list(result.scalars().all())

    async def create(self, user: User, password: str) -> User:
        """
        Insert ``user`` with a freshly hashed ``password``.

        id, created_at and updated_at are populated on the returned object.
        Raises DuplicateUserError when username or email is taken.
        """
        user.password_hash = hash_password(password)
        try:
            # SAVEPOINT: a rejected insert leaves the rest of the session intact
            async with self.db.begin_nested():
                self.db.add(user)
                await self.db.flush()
        except IntegrityError as e:
            field = _unique_violation_field(e)
            if field is None:
                raise
            raise DuplicateUserError(field or None, details=str(e.orig)) from e
        await self.db.commit()

        logger.info(f"Created user {user.username} ({user.id})")
        return user

    async def update(self, user: User, changes: Optional[Dict[str, Any]] = None) -> User:
        """
        Apply ``changes`` to ``user``, persist it and refresh updated_at.

        Changes are applied inside a SAVEPOINT, so a user deleted in the
        meantime raises UserNotFoundError without expiring other objects
        loaded in the session.
        """
        user_id = user.id
        try:
            async with self.db.begin_nested():
                for field, value in (changes or {}).items():
                    setattr(user, field, value)
                user.updated_at = datetime.now(timezone.utc)
                await self.db.flush()
        except StaleDataError as e:
            # Edits made before the call fail in the pre-savepoint flush
            if not self.db.is_active:
                await self.db.rollback()
            raise UserNotFoundError(details=user_id) from e
        await self.db.commit()

        logger.info(f"Updated user {user.username} ({user.id})")
        return user

    async def update_password(self, user_id: str, password: str) -> None:
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                password_hash=hash_password(password),
                updated_at=datetime.now(timezone.utc),
            )
        )
        if result.rowcount == 0:
            raise UserNotFoundError(details=user_id)
        await self.db.commit()

        logger.info(f"Password updated for user {user_id}")

    async def delete_many(self, user_ids: Iterable[str]) -> int:
        """Delete every listed user; unknown ids are ignored."""
        ids = list(user_ids)
        result = await self.db.execute(
            delete(User)
            .where(User.id.in_(ids))
        )
        await self.db.commit()

        logger.info(f"Deleted {result.rowcount} of {len(ids)} requested users")
        return result.rowcount

    async def authenticate(self, username: str, password: str) -> User:
        """
        Return the user for a username/password pair.

        Unknown username and wrong password both raise InvalidCredentialsError;
        an inactive account raises UserDisabledError (a subclass).
        """
        try:
            user = await self.get_by_username(username)
        except UserNotFoundError as e:
            # Keep timing close to the wrong-password path
            dummy_verify()
            raise InvalidCredentialsError() from e

        # Verify before the active check so disabled accounts cost the same bcrypt round
        password_ok = verify_password(password, user.password_hash)

        if not user.is_active:
            raise UserDisabledError()

        if not password_ok:
            raise InvalidCredentialsError()

        return user

    async def get_role_by_id(self, role_id: str) -> Role:
        result = await self.db.execute(
            select(Role).where(Role.id == role_id)
        )
        role = result.scalar_one_or_none()
        if role is None:
            raise RoleNotFoundError(details=role_id)
        return role

    async def get_role_by_name(self, name: str) -> Role:
        result = await self.db.execute(
            select(Role).where(Role.name == name)
        )
        role = result.scalar_one_or_none()
        if role is None:
            raise RoleNotFoundError(details=name)
        return role
