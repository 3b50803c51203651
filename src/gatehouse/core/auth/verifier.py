"""Assertion verifier protocol for federated login."""

from typing import Protocol, runtime_checkable

from gatehouse.core.auth.types import FederatedAssertion


@runtime_checkable
class AssertionVerifier(Protocol):
    """Checks an identity provider's assertion and extracts its claims.

    Each provider (Google, Facebook, ...) gets its own implementation;
    the resolver treats them all the same.
    """

    @property
    def audience(self) -> str:
        """Audience the assertion must have been issued for."""
        ...

    async def verify(self, raw_assertion: dict[str, str], audience: str) -> FederatedAssertion:
        """Verify a raw assertion payload.

        Args:
            raw_assertion: Provider-specific request payload (ID token,
                access token and user id, ...).
            audience: Expected audience, typically our client id.

        Returns:
            The verified email, name and verified flag.

        Raises:
            VerificationError: On signature, audience or transport failure.
        """
        ...
