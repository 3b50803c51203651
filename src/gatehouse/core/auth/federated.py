"""Federated sign-in: verify, find-or-create, issue.

Every identity provider goes through the same linear sequence; the only
per-provider piece is the AssertionVerifier.
"""

from collections.abc import Mapping

import structlog

from gatehouse.core.auth.password import derive_federated_password, hash_password
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.session import SessionIssuer
from gatehouse.core.auth.types import Account, FederatedAssertion, SessionResult
from gatehouse.core.auth.validation import check_email
from gatehouse.core.auth.verifier import AssertionVerifier
from gatehouse.core.exceptions import (
    AssertionVerificationFailed,
    DuplicateEmail,
    EmailTaken,
    UnverifiedAssertion,
    ValidationError,
    VerificationError,
)

logger = structlog.get_logger()


class FederatedIdentityResolver:
    """Signs in with an identity provider assertion."""

    def __init__(
        self,
        repo: AccountRepository,
        sessions: SessionIssuer,
        verifiers: Mapping[str, AssertionVerifier],
        server_secret: str,
    ) -> None:
        """Initialize the resolver.

        Args:
            repo: Account repository.
            sessions: Session issuer shared with password sign-in.
            verifiers: Assertion verifier per provider name.
            server_secret: Key for deriving federated account credentials.
        """
        self._repo = repo
        self._sessions = sessions
        self._verifiers = dict(verifiers)
        self._server_secret = server_secret

    @property
    def providers(self) -> list[str]:
        """Configured provider names."""
        return sorted(self._verifiers)

    async def sign_in_with_assertion(
        self,
        provider: str,
        raw_assertion: dict[str, str],
    ) -> SessionResult:
        """Verify an assertion and sign in, creating the account on first login.

        Args:
            provider: Provider name, e.g. "google".
            raw_assertion: Provider-specific payload.

        Returns:
            Session token and public account projection.

        Raises:
            ValidationError: If the provider is not configured.
            AssertionVerificationFailed: If the provider rejects the assertion.
            UnverifiedAssertion: If the provider does not vouch for the email.
        """
        verifier = self._verifiers.get(provider)
        if verifier is None:
            raise ValidationError(f"Unsupported identity provider: {provider}")

        try:
            assertion = await verifier.verify(raw_assertion, verifier.audience)
        except VerificationError as e:
            logger.warning("federated_assertion_rejected", provider=provider, error=str(e))
            raise AssertionVerificationFailed(f"{provider.capitalize()} login failed") from None

        if not assertion.verified:
            logger.warning("federated_assertion_unverified", provider=provider)
            raise UnverifiedAssertion(f"{provider.capitalize()} login failed. Try again")

        try:
            check_email(assertion.email)
        except ValidationError:
            raise AssertionVerificationFailed(f"{provider.capitalize()} login failed") from None

        account = await self._find_or_create(assertion)
        logger.info("federated_sign_in", provider=provider, account_id=str(account.id))
        return self._sessions.issue_for(account)

    async def _find_or_create(self, assertion: FederatedAssertion) -> Account:
        account = await self._repo.get_account_by_email(assertion.email)
        if account:
            return account

        credential = derive_federated_password(assertion.email, self._server_secret)
        try:
            account = await self._repo.create_account(
                name=assertion.name or assertion.email.split("@")[0],
                email=assertion.email,
                password_hash=hash_password(credential),
            )
        except DuplicateEmail:
            # A concurrent first login won the insert
            account = await self._repo.get_account_by_email(assertion.email)
            if account is None:
                raise EmailTaken() from None
            return account

        logger.info("federated_account_created", account_id=str(account.id))
        return account
