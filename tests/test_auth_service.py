"""Unit tests for the authentication service."""
from datetime import timedelta
from uuid import uuid4

import pytest

from app.services.auth import AuthService
from app.services.errors import InvalidCredentialsError, InvalidTokenError, UserDisabledError
from app.services.tokens import TokenCodec

ALICE_PASSWORD = "Pa55w0rd!"
BOB_PASSWORD = "Bob12345"


@pytest.fixture
def auth_service(repository, token_codec) -> AuthService:
    return AuthService(repository, token_codec)


@pytest.mark.asyncio
async def test_login_returns_tokens_for_user(auth_service, token_codec, alice):
    tokens, user = await auth_service.login("alice", ALICE_PASSWORD)

    assert user.id == alice.id
    assert token_codec.validate(tokens.access_token).sub == alice.id
    assert token_codec.validate(tokens.refresh_token).sub == alice.id


@pytest.mark.asyncio
async def test_login_rejects_bad_credentials(auth_service, alice):
    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("alice", "wrong")
    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("nobody", ALICE_PASSWORD)


@pytest.mark.asyncio
async def test_login_rejects_disabled_user(auth_service, repository, bob):
    await repository.update(bob, {"is_active": False})

    with pytest.raises(UserDisabledError):
        await auth_service.login("bob", BOB_PASSWORD)


@pytest.mark.asyncio
async def test_refresh_mints_new_pair_for_same_subject(auth_service, token_codec, bob):
    tokens, _ = await auth_service.login("bob", BOB_PASSWORD)

    refreshed = await auth_service.refresh(tokens.refresh_token)

    assert token_codec.validate(refreshed.access_token).sub == bob.id
    assert token_codec.validate(refreshed.refresh_token).sub == bob.id
    assert refreshed.refresh_uuid != tokens.refresh_uuid
    # No revocation: the old refresh token keeps working
    await auth_service.refresh(tokens.refresh_token)


@pytest.mark.asyncio
async def test_refresh_rejects_invalid_token(auth_service):
    with pytest.raises(InvalidTokenError):
        await auth_service.refresh("not-a-token")


@pytest.mark.asyncio
async def test_refresh_rejects_foreign_signature(auth_service, bob):
    other = TokenCodec("other-secret", timedelta(minutes=15), timedelta(days=7))

    with pytest.raises(InvalidTokenError):
        await auth_service.refresh(other.mint(bob.id).refresh_token)


@pytest.mark.asyncio
async def test_refresh_rejects_unknown_subject(auth_service, token_codec):
    with pytest.raises(InvalidTokenError):
        await auth_service.refresh(token_codec.mint(str(uuid4())).refresh_token)


@pytest.mark.asyncio
async def test_refresh_rejects_disabled_user(auth_service, repository, token_codec, bob):
    refresh_token = token_codec.mint(bob.id).refresh_token
    await repository.update(bob, {"is_active": False})

    with pytest.raises(InvalidTokenError):
        await auth_service.refresh(refresh_token)
