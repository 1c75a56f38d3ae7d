"""Tests for the out-of-band user bootstrap script."""
import importlib.util
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.users import UserRepository

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "create_user.py"


@pytest.fixture
def script(db_engine, monkeypatch):
    spec = importlib.util.spec_from_file_location("create_user_script", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    monkeypatch.setattr(
        module,
        "async_session_maker",
        async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False),
    )
    return module


def _args(script, *argv):
    return script.parse_args(list(argv))


@pytest.mark.asyncio
async def test_creates_admin_and_role(script, db_session):
    code = await script.run(_args(
        script, "root", "root@example.com", "RootPass1",
        "--first-name", "Root", "--last-name", "User", "--create-role",
    ))

    assert code == 0
    users = UserRepository(db_session)
    user = await users.authenticate("root", "RootPass1")
    role = await users.get_role_by_id(user.role_id)
    assert role.name == "Admin"


@pytest.mark.asyncio
async def test_missing_role_without_create_flag(script):
    code = await script.run(_args(
        script, "root", "root@example.com", "RootPass1",
        "--first-name", "Root", "--last-name", "User", "--role", "Sales",
    ))

    assert code == 1


@pytest.mark.asyncio
async def test_duplicate_user(script, bob):
    code = await script.run(_args(
        script, "bob", "other@example.com", "Whatever1",
        "--first-name", "B", "--last-name", "B", "--role", "Sales",
    ))

    assert code == 1


@pytest.mark.asyncio
async def test_update_password(script, db_session, bob):
    code = await script.run(_args(script, "bob", "--update-password", "Fresh-Pass-2"))

    assert code == 0
    db_session.expire_all()
    user = await UserRepository(db_session).authenticate("bob", "Fresh-Pass-2")
    assert user.id == bob.id


@pytest.mark.asyncio
async def test_update_password_unknown_user(script):
    code = await script.run(_args(script, "ghost", "--update-password", "Fresh-Pass-2"))

    assert code == 1
