"""Purpose-scoped signed tokens.

Tokens are HS256 JWTs. Every purpose (activation, session, reset) is
signed with its own secret and carries a ``purpose`` claim, so a token
minted for one flow never verifies for another.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from gatehouse.core.auth.types import TokenPurpose

ALGORITHM = "HS256"

ACTIVATION_TOKEN_TTL = timedelta(minutes=5)
SESSION_TOKEN_TTL = timedelta(days=7)
RESET_TOKEN_TTL = timedelta(minutes=10)

# Claims managed by the service; callers cannot override them
RESERVED_CLAIMS = frozenset({"exp", "iat", "purpose"})


class TokenError(Exception):
    """Raised when token validation fails."""

    pass


class TokenExpired(TokenError):
    """The token's expiry has been reached."""

    pass


class TokenInvalid(TokenError):
    """Bad signature, malformed payload or wrong purpose."""

    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies purpose-scoped signed tokens.

    Holds no state besides its secrets and clock.
    """

    def __init__(
        self,
        secrets: Mapping[TokenPurpose, str],
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize with one secret per purpose.

        Args:
            secrets: Signing secret for each token purpose.
            clock: Returns the current UTC time.

        Raises:
            ValueError: If a purpose has no secret, or two purposes share one.
        """
        missing = [p.value for p in TokenPurpose if not secrets.get(p)]
        if missing:
            raise ValueError(f"Missing token secret for: {', '.join(missing)}")
        if len(set(secrets.values())) != len(secrets):
            raise ValueError("Each token purpose needs a distinct secret")

        self._secrets = dict(secrets)
        self._clock = clock

    def issue(
        self,
        purpose: TokenPurpose,
        claims: Mapping[str, Any],
        ttl: timedelta,
    ) -> str:
        """Create a signed token.

        Args:
            purpose: What the token may be used for.
            claims: Payload claims to embed.
            ttl: Lifetime of the token.

        Returns:
            Encoded JWT string.
        """
        reserved = RESERVED_CLAIMS.intersection(claims)
        if reserved:
            raise ValueError(f"Reserved claims cannot be set: {', '.join(sorted(reserved))}")

        now = self._clock()
        payload = {
            **claims,
            "purpose": purpose.value,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        return jwt.encode(payload, self._secrets[purpose], algorithm=ALGORITHM)

    def verify(self, purpose: TokenPurpose, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Args:
            purpose: The purpose the token must have been issued for.
            token: Encoded JWT string.

        Returns:
            Caller claims, without the reserved ones.

        Raises:
            TokenExpired: If the current time is at or past the expiry.
            TokenInvalid: If the signature, payload or purpose is wrong.
        """
        if not token:
            raise TokenInvalid("Token is missing")

        try:
            payload = jwt.decode(
                token,
                self._secrets[purpose],
                algorithms=[ALGORITHM],
                # Expiry is checked below against the injected clock
                options={"require": ["exp", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Invalid token: {e}") from None

        if payload.get("purpose") != purpose.value:
            raise TokenInvalid("Token issued for a different purpose")

        exp = payload["exp"]
        if not isinstance(exp, int):
            raise TokenInvalid("Malformed expiry")
        if int(self._clock().timestamp()) >= exp:
            raise TokenExpired("Token has expired")

        return {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}
