"""Password reset by emailed single-use link.

Active -> ResetRequested -> Active. The reset token is a signed token
whose raw value is also mirrored onto the account. Consuming it clears
the stored copy, so a token works at most once, and a newer request
overwrites (and thereby revokes) any older outstanding token.
"""

import secrets

import structlog

from gatehouse.core.auth.mailer import Mailer
from gatehouse.core.auth.messages import password_reset_email
from gatehouse.core.auth.password import hash_password
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.tokens import RESET_TOKEN_TTL, TokenError, TokenExpired, TokenService
from gatehouse.core.auth.types import TokenPurpose
from gatehouse.core.auth.validation import check_email, check_password
from gatehouse.core.exceptions import ExpiredOrInvalid, NotFound

logger = structlog.get_logger()


class PasswordResetService:
    """Requests and completes password resets."""

    def __init__(
        self,
        repo: AccountRepository,
        tokens: TokenService,
        mailer: Mailer,
        client_url: str,
    ) -> None:
        """Initialize the password reset flow.

        Args:
            repo: Account repository.
            tokens: Token service.
            mailer: Mailer used for the reset email.
            client_url: Frontend base URL for reset links.
        """
        self._repo = repo
        self._tokens = tokens
        self._mailer = mailer
        self._client_url = client_url

    async def request_reset(self, email: str) -> str:
        """Issue a reset token, store it on the account and email it.

        The token is stored before the email is sent. If sending fails the
        request fails; the stored token is simply replaced by the next
        request.

        Args:
            email: Account email address.

        Returns:
            User-facing confirmation message.

        Raises:
            ValidationError: If the email is malformed.
            NotFound: If no account uses the email.
            DeliveryError: If the reset email could not be sent.
        """
        email = check_email(email)

        account = await self._repo.get_account_by_email(email)
        if not account:
            raise NotFound()

        token = self._tokens.issue(
            TokenPurpose.RESET,
            # jti keeps two requests in the same second from minting the same token
            {"sub": str(account.id), "jti": secrets.token_urlsafe(16)},
            RESET_TOKEN_TTL,
        )

        if not await self._repo.set_reset_token(account.id, token):
            # Account vanished between lookup and write
            raise NotFound()

        message = password_reset_email(email, self._client_url, token)
        try:
            await self._mailer.send(message.to, message.subject, message.html_body)
        except Exception:
            logger.error("password_reset_email_failed", account_id=str(account.id))
            raise

        logger.info("password_reset_email_sent", account_id=str(account.id))
        return f"Email has been sent to {email}"

    async def complete_reset(self, token: str, new_password: str) -> str:
        """Consume a reset token and set a new password.

        Args:
            token: Reset token from the emailed link.
            new_password: The new plain text password.

        Returns:
            User-facing confirmation message.

        Raises:
            ValidationError: If the new password is malformed.
            ExpiredOrInvalid: If the token fails verification, was already
                used, or was superseded by a newer request.
        """
        new_password = check_password(new_password)

        try:
            self._tokens.verify(TokenPurpose.RESET, token)
        except TokenExpired:
            logger.warning("password_reset_token_expired")
            raise ExpiredOrInvalid() from None
        except TokenError as e:
            logger.warning("password_reset_token_invalid", error=str(e))
            raise ExpiredOrInvalid() from None

        # Matching on the stored value, not the id claim, is what makes the token single-use
        account = await self._repo.consume_reset_token(token, hash_password(new_password))
        if not account:
            logger.warning("password_reset_token_not_outstanding")
            raise ExpiredOrInvalid()

        logger.info("password_reset_successful", account_id=str(account.id))
        return "Password reset success! You can now login with your new password"
