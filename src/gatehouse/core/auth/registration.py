"""Signup by emailed activation link.

Unregistered -> PendingActivation -> Active. The pending state is never
stored: it lives entirely inside the activation token, which carries the
whole signup payload until the link is followed.
"""

import structlog

from gatehouse.core.auth.mailer import Mailer
from gatehouse.core.auth.messages import activation_email
from gatehouse.core.auth.password import hash_password
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.tokens import (
    ACTIVATION_TOKEN_TTL,
    TokenError,
    TokenExpired,
    TokenService,
)
from gatehouse.core.auth.types import Account, PendingRegistration, TokenPurpose
from gatehouse.core.auth.validation import check_email, check_name, check_password
from gatehouse.core.exceptions import DuplicateEmail, EmailTaken, ExpiredOrInvalid

logger = structlog.get_logger()


class RegistrationService:
    """Starts and completes account registration."""

    def __init__(
        self,
        repo: AccountRepository,
        tokens: TokenService,
        mailer: Mailer,
        client_url: str,
    ) -> None:
        """Initialize the registration flow.

        Args:
            repo: Account repository.
            tokens: Token service.
            mailer: Mailer used for the activation email.
            client_url: Frontend base URL for activation links.
        """
        self._repo = repo
        self._tokens = tokens
        self._mailer = mailer
        self._client_url = client_url

    async def start_registration(self, name: str, email: str, password: str) -> str:
        """Validate a signup and email an activation link.

        No account is created here.

        Args:
            name: Display name.
            email: Email address.
            password: Plain text password.

        Returns:
            User-facing confirmation message.

        Raises:
            ValidationError: If an input is malformed.
            EmailTaken: If an account already uses the email.
            DeliveryError: If the activation email could not be sent.
        """
        name = check_name(name)
        email = check_email(email)
        password = check_password(password)

        if await self._repo.get_account_by_email(email):
            raise EmailTaken()

        pending = PendingRegistration(name=name, email=email, password=password)
        token = self._tokens.issue(
            TokenPurpose.ACTIVATION,
            pending.model_dump(),
            ACTIVATION_TOKEN_TTL,
        )

        message = activation_email(email, self._client_url, token)
        await self._mailer.send(message.to, message.subject, message.html_body)

        logger.info("activation_email_sent")
        return f"Email has been sent to {email}"

    async def complete_registration(self, token: str) -> Account:
        """Create the account carried by an activation token.

        Args:
            token: Activation token from the emailed link.

        Returns:
            The newly created account.

        Raises:
            ExpiredOrInvalid: If the token fails verification.
            EmailTaken: If the email was claimed since the token was issued.
        """
        try:
            claims = self._tokens.verify(TokenPurpose.ACTIVATION, token)
            pending = PendingRegistration.model_validate(claims)
        except TokenExpired:
            logger.warning("activation_token_expired")
            raise ExpiredOrInvalid("Expired link. Signup again") from None
        except (TokenError, ValueError) as e:
            logger.warning("activation_token_invalid", error=str(e))
            raise ExpiredOrInvalid("Expired link. Signup again") from None

        try:
            account = await self._repo.create_account(
                name=pending.name,
                email=pending.email,
                password_hash=hash_password(pending.password),
            )
        except DuplicateEmail:
            logger.warning("activation_duplicate_email")
            raise EmailTaken() from None

        logger.info("account_activated", account_id=str(account.id))
        return account
