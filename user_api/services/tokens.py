"""Signed, time-limited bearer tokens."""

import re
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from user_api.exceptions import (
    InvalidTokenError,
    TokenConfigurationError,
    TokenError,
    TokenExpiredError,
    TokenPayloadError,
)
from user_api.schemas.auth import TokenPayload

DEFAULT_EXPIRES_IN = "24h"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w)?\s*$")
_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


def parse_expires_in(value: str | int | timedelta) -> timedelta:
    """Convert an expiry like ``"24h"``, ``"1ms"``, ``3600`` or a timedelta.

    Bare numbers are seconds.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return timedelta(seconds=value)
    if isinstance(value, str):
        match = _DURATION_PATTERN.match(value)
        if match:
            amount, unit = match.groups()
            return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit or "s"])
    raise ValueError(f"Invalid expiresIn value: {value!r}")


class TokenService:
    """Issues and verifies JWTs carrying ``{userId, email}``."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        default_expires_in: str | int | timedelta = DEFAULT_EXPIRES_IN,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.default_expires_in = parse_expires_in(default_expires_in)

    def _require_secret(self) -> str:
        if not self._secret:
            raise TokenConfigurationError()
        return self._secret

    def issue(
        self, payload: TokenPayload, expires_in: str | int | timedelta | None = None
    ) -> str:
        """Create a signed token for the given user."""
        secret = self._require_secret()
        if not payload.user_id or not payload.email:
            raise TokenPayloadError("Payload must contain userId and email")

        lifetime = (
            self.default_expires_in if expires_in is None else parse_expires_in(expires_in)
        )
        now = datetime.now(UTC)
        claims = {
            "userId": payload.user_id,
            "email": payload.email,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Decode and validate a token.

        Raises:
            TokenConfigurationError: no secret configured
            TokenExpiredError: signature valid, expiry passed
            InvalidTokenError: malformed token or bad signature
            TokenPayloadError: userId or email missing from the claims
        """
        secret = self._require_secret()
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Token must be a non-empty string")

        try:
            claims = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except JWTError as e:
            raise InvalidTokenError() from e

        user_id = claims.get("userId")
        email = claims.get("email")
        if not user_id or not email:
            raise TokenPayloadError()
        return TokenPayload(user_id=str(user_id), email=str(email))

    def is_expired(self, token: str) -> bool:
        """Report whether a token has expired.

        Only an expiry failure counts; invalid tokens report False.
        """
        try:
            self.verify(token)
        except TokenExpiredError:
            return True
        except TokenError:
            return False
        return False
