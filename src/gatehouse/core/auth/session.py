"""Password sign-in and session token issuance."""

import structlog

from gatehouse.core.auth.password import verify_password
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.tokens import SESSION_TOKEN_TTL, TokenService
from gatehouse.core.auth.types import Account, SessionResult, TokenPurpose
from gatehouse.core.exceptions import InvalidCredentials

logger = structlog.get_logger()


class SessionIssuer:
    """Checks credentials and issues session tokens."""

    def __init__(self, repo: AccountRepository, tokens: TokenService) -> None:
        """Initialize with repository and token service.

        Args:
            repo: Account repository.
            tokens: Token service.
        """
        self._repo = repo
        self._tokens = tokens

    def issue_for(self, account: Account) -> SessionResult:
        """Issue a session token for an already authenticated account.

        Only the account id goes into the token.
        """
        token = self._tokens.issue(
            TokenPurpose.SESSION,
            {"sub": str(account.id)},
            SESSION_TOKEN_TTL,
        )
        return SessionResult(token=token, user=account.to_public())

    async def sign_in(self, email: str, password: str) -> SessionResult:
        """Authenticate with email and password.

        Args:
            email: Account email address.
            password: Plain text password.

        Returns:
            Session token and public account projection.

        Raises:
            InvalidCredentials: If the account does not exist or the
                password does not match. Both cases are indistinguishable.
        """
        account = await self._repo.get_account_by_email(email) if email else None

        # Always run a bcrypt check so unknown emails take as long as wrong passwords
        password_hash = account.password_hash if account else None
        if not verify_password(password or "", password_hash) or account is None:
            logger.info("sign_in_rejected")
            raise InvalidCredentials()

        logger.info("sign_in_succeeded", account_id=str(account.id))
        return self.issue_for(account)
