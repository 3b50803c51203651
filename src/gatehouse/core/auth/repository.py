"""Account repository protocol for database operations."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from gatehouse.core.auth.types import Account, AccountRole


@runtime_checkable
class AccountRepository(Protocol):
    """Protocol for account storage.

    Implementations must enforce email uniqueness themselves and make
    ``consume_reset_token`` an atomic compare-and-clear; the flows rely
    on both under concurrent requests.
    """

    async def get_account_by_id(self, account_id: UUID) -> Account | None:
        """Get account by ID."""
        ...

    async def get_account_by_email(self, email: str) -> Account | None:
        """Get account by exact email address."""
        ...

    async def get_account_by_reset_token(self, token: str) -> Account | None:
        """Get the account whose outstanding reset token equals ``token``."""
        ...

    async def create_account(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: AccountRole = AccountRole.USER,
    ) -> Account:
        """Create a new account.

        Raises:
            DuplicateEmail: If an account already uses the email.
        """
        ...

    async def update_account(
        self,
        account_id: UUID,
        name: str | None = None,
        password_hash: str | None = None,
    ) -> Account | None:
        """Update account fields."""
        ...

    async def set_reset_token(self, account_id: UUID, token: str) -> Account | None:
        """Store ``token`` as the outstanding reset token, replacing any other."""
        ...

    async def consume_reset_token(self, token: str, password_hash: str) -> Account | None:
        """Atomically swap in a new password hash and clear the reset token.

        Only succeeds when the stored reset token equals ``token``.

        Returns:
            The updated account, or None if no account holds the token.
        """
        ...
