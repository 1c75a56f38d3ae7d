#!/usr/bin/env python3
"""
Bootstrap users outside the API (e.g. the first administrator).

Usage:
    python3 scripts/create_user.py USERNAME EMAIL PASSWORD --first-name Alice --last-name Admin [--role Admin] [--create-role]
    python3 scripts/create_user.py USERNAME --update-password NEW_PASSWORD

Database connection is taken from the same DB_* / DATABASE_URL environment
variables the server uses.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from app.database import async_session_maker, dispose_engine
from app.models.role import ADMIN_ROLE_NAME, Role
from app.models.user import User
from app.services.errors import DuplicateUserError, RoleNotFoundError, UserNotFoundError
from app.services.users import UserRepository

logger = logging.getLogger("create_user")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a CRM user or reset a password.")
    parser.add_argument("username")
    parser.add_argument("email", nargs="?")
    parser.add_argument("password", nargs="?")
    parser.add_argument("--first-name", default="")
    parser.add_argument("--last-name", default="")
    parser.add_argument("--department")
    parser.add_argument("--role", default=ADMIN_ROLE_NAME, help="Role name (default: Admin)")
    parser.add_argument("--create-role", action="store_true", help="Create the role if missing")
    parser.add_argument("--update-password", metavar="NEW_PASSWORD",
                        help="Reset the password of an existing user instead of creating one")
    return parser.parse_args(argv)


async def resolve_role(users: UserRepository, name: str, create: bool) -> Role:
    try:
        return await users.get_role_by_name(name)
    except RoleNotFoundError:
        if not create:
            raise
    role = Role(name=name, description=f"{name} role", permissions={})
    users.db.add(role)
    await users.db.commit()
    logger.info(f"Created role {name} ({role.id})")
    return role


async def run(args: argparse.Namespace) -> int:
    async with async_session_maker() as session:
        users = UserRepository(session)

        if args.update_password:
            try:
                user = await users.get_by_username(args.username)
                await users.update_password(user.id, args.update_password)
            except UserNotFoundError:
                logger.error(f"User '{args.username}' does not exist")
                return 1
            logger.info(f"Password updated for '{args.username}'")
            return 0

        if not (args.email and args.password and args.first_name and args.last_name):
            logger.error("EMAIL, PASSWORD, --first-name and --last-name are required to create a user")
            return 1

        try:
            role = await resolve_role(users, args.role, args.create_role)
        except RoleNotFoundError:
            logger.error(f"Role '{args.role}' does not exist (use --create-role)")
            return 1

        user = User(
            username=args.username,
            email=args.email,
            first_name=args.first_name,
            last_name=args.last_name,
            department=args.department,
            role_id=role.id,
            is_active=True,
        )
        try:
            await users.create(user, args.password)
        except DuplicateUserError as e:
            logger.error(f"Could not create '{args.username}': {e.field or 'user'} already exists")
            return 1

        logger.info(f"Created user '{user.username}' ({user.id}) with role '{role.name}'")
        return 0


async def main(argv: Optional[list] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    try:
        return await run(parse_args(argv))
    finally:
        await dispose_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
