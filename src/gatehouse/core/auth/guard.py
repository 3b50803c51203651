"""Session token and role checks for protected operations."""

from uuid import UUID

import structlog

from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.tokens import TokenError, TokenService
from gatehouse.core.auth.types import Account, AccountRole, TokenPurpose
from gatehouse.core.exceptions import Forbidden, Unauthorized

logger = structlog.get_logger()


class AccessGuard:
    """Resolves the caller from a session token and checks roles."""

    def __init__(self, repo: AccountRepository, tokens: TokenService) -> None:
        self._repo = repo
        self._tokens = tokens

    def authenticate(self, token: str | None) -> UUID:
        """Verify a session token and return the account id it carries.

        Raises:
            Unauthorized: If the token is missing, expired or invalid.
        """
        if not token:
            raise Unauthorized()
        try:
            claims = self._tokens.verify(TokenPurpose.SESSION, token)
            return UUID(str(claims["sub"]))
        except (TokenError, KeyError, ValueError) as e:
            logger.warning("session_token_rejected", error=str(e))
            raise Unauthorized() from None

    async def require_role(
        self,
        account_id: UUID,
        role: AccountRole = AccountRole.ADMIN,
    ) -> Account:
        """Load the account and check its role.

        Raises:
            Forbidden: If the account does not exist or has another role.
        """
        account = await self._repo.get_account_by_id(account_id)
        if account is None or account.role != role:
            logger.warning("role_check_failed", account_id=str(account_id), required=role.value)
            raise Forbidden()
        return account
