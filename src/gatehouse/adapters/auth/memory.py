"""In-memory implementation of AccountRepository.

Used when no DATABASE_URL is configured and in tests. A single lock
serializes writes so the uniqueness check and the compare-and-clear
behave like the database constraints they stand in for.
"""

import asyncio
from datetime import UTC, datetime
from uuid import UUID, uuid4

from gatehouse.core.auth.types import Account, AccountRole
from gatehouse.core.exceptions import DuplicateEmail


class InMemoryAccountRepository:
    """Dict-backed account repository for a single process."""

    def __init__(self) -> None:
        self._accounts: dict[UUID, Account] = {}
        self._lock = asyncio.Lock()

    def _copy(self, account: Account | None) -> Account | None:
        return account.model_copy() if account else None

    async def get_account_by_id(self, account_id: UUID) -> Account | None:
        """Get account by ID."""
        return self._copy(self._accounts.get(account_id))

    async def get_account_by_email(self, email: str) -> Account | None:
        """Get account by exact email address."""
        for account in self._accounts.values():
            if account.email == email:
                return self._copy(account)
        return None

    async def get_account_by_reset_token(self, token: str) -> Account | None:
        """Get the account holding this outstanding reset token."""
        if not token:
            return None
        for account in self._accounts.values():
            if account.reset_token == token:
                return self._copy(account)
        return None

    async def create_account(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: AccountRole = AccountRole.USER,
    ) -> Account:
        """Create a new account, rejecting duplicate emails."""
        async with self._lock:
            if any(a.email == email for a in self._accounts.values()):
                raise DuplicateEmail()
            account = Account(
                id=uuid4(),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                created_at=datetime.now(UTC),
            )
            self._accounts[account.id] = account
            return account.model_copy()

    async def update_account(
        self,
        account_id: UUID,
        name: str | None = None,
        password_hash: str | None = None,
    ) -> Account | None:
        """Update account fields."""
        async with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            if name is not None:
                account.name = name
            if password_hash is not None:
                account.password_hash = password_hash
            return account.model_copy()

    async def set_reset_token(self, account_id: UUID, token: str) -> Account | None:
        """Store the outstanding reset token, replacing any previous one."""
        async with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            account.reset_token = token
            return account.model_copy()

    async def consume_reset_token(self, token: str, password_hash: str) -> Account | None:
        """Compare-and-clear the reset token under the write lock."""
        if not token:
            return None
        async with self._lock:
            for account in self._accounts.values():
                if account.reset_token == token:
                    account.password_hash = password_hash
                    account.reset_token = ""
                    return account.model_copy()
            return None
