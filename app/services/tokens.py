"""Signed bearer tokens (HS256 JWT) carrying sub, exp and jti."""
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt

from app.services.errors import InvalidTokenError

JWT_ALGORITHM = "HS256"


@dataclass
class TokenDetails:
    """An access/refresh pair minted together for one subject."""
    access_token: str
    refresh_token: str
    access_uuid: str
    refresh_uuid: str
    at_expires: int
    rt_expires: int

    @property
    def expires_in(self) -> int:
        # Kept as access expiry minus refresh expiry; see DESIGN.md
        return self.at_expires - self.rt_expires


@dataclass
class TokenClaims:
    """Validated claims of a bearer token."""
    sub: str
    exp: int
    jti: Optional[str] = None


class TokenCodec:
    """Stateless minting and validation; there is no revocation list."""

    def __init__(
        self,
        secret: str,
        access_expires: timedelta,
        refresh_expires: timedelta,
    ):
        self.secret = secret
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires

    def _encode(self, subject: str, expires: int, jti: str) -> str:
        payload = {
            "sub": subject,
            "exp": expires,
            "jti": jti,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def mint(self, subject: str) -> TokenDetails:
        """Create a fresh access and refresh token for ``subject``."""
        now = int(time.time())
        at_expires = now + int(self.access_expires.total_seconds())
        rt_expires = now + int(self.refresh_expires.total_seconds())
        access_uuid = str(uuid4())
        refresh_uuid = str(uuid4())

        return TokenDetails(
            access_token=self._encode(subject, at_expires, access_uuid),
            refresh_token=self._encode(subject, rt_expires, refresh_uuid),
            access_uuid=access_uuid,
            refresh_uuid=refresh_uuid,
            at_expires=at_expires,
            rt_expires=rt_expires,
        )

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature, algorithm and expiry and return the claims.

        Raises InvalidTokenError when the token is not HS256, the signature
        does not match the configured secret, ``exp`` is missing or not in
        the future, or ``sub`` is not a UUID.
        """
        try:
            payload: Dict[str, Any] = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= time.time():
            raise InvalidTokenError("token has expired")

        sub = payload.get("sub")
        try:
            UUID(str(sub))
        except ValueError as e:
            raise InvalidTokenError("invalid subject in token") from e

        return TokenClaims(sub=str(sub), exp=int(exp), jti=payload.get("jti"))
