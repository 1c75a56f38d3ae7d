"""Authentication service: login and token refresh."""
import logging
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError

from app.models.user import User
from app.services.errors import IdentityError, InvalidTokenError
from app.services.tokens import TokenCodec, TokenDetails
from app.services.users import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Composes the user repository and token codec into login and refresh."""

    def __init__(self, users: UserRepository, tokens: TokenCodec):
        self.users = users
        self.tokens = tokens

    async def login(self, username: str, password: str) -> Tuple[TokenDetails, User]:
        """
        Check credentials and mint a token pair for the user.

        Raises InvalidCredentialsError (or UserDisabledError) on failure.
        """
        try:
            user = await self.users.authenticate(username, password)
        except IdentityError as e:
            logger.warning(f"Login failed for {username!r}: {e}")
            raise

        tokens = self.tokens.mint(user.id)
        logger.info(f"User {user.username} logged in")
        return tokens, user

    async def refresh(self, refresh_token: str) -> TokenDetails:
        """
        Mint a new pair for the subject of a valid refresh token.

        The presented token is not invalidated. Every failure surfaces as
        InvalidTokenError so callers cannot tell expired, malformed and
        unknown-user cases apart.
        """
        try:
            claims = self.tokens.validate(refresh_token)
            user = await self.users.get_by_id(claims.sub)
        except IdentityError as e:
            logger.info(f"Refresh rejected: {e}")
            raise InvalidTokenError("invalid refresh token") from e
        except SQLAlchemyError as e:
            logger.error(f"Refresh failed looking up token subject: {e}")
            raise InvalidTokenError("invalid refresh token") from e

        if not user.is_active:
            logger.info(f"Refresh rejected: user {user.id} is disabled")
            raise InvalidTokenError("invalid refresh token")

        return self.tokens.mint(user.id)

    async def logout(self) -> None:
        """Tokens are stateless, so there is nothing to revoke."""
        return None
