"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Tokens carry only the account id (``sub``), issue time and expiry. Callers
re-fetch the account on every request, so profile changes made after login
are never served stale from the token.
"""

from datetime import datetime, timedelta, timezone

import jwt

from src.domain.exceptions import InvalidToken


class JwtTokenIssuer:
    """Implements TokenIssuer protocol via PyJWT."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 86400) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, account_id: int) -> str:
        """Encode the account id as a signed JWT."""
        now = datetime.now(timezone.utc)
        claims = {"sub": str(account_id), "iat": now, "exp": now + self._ttl}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def read(self, token: str) -> int:
        """Decode a token and return the account id it was issued for."""
        try:
            data: dict = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
            return int(data["sub"])
        except (jwt.PyJWTError, ValueError) as e:
            raise InvalidToken() from e
