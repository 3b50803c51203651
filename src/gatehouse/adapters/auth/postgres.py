"""PostgreSQL implementation of AccountRepository."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import asyncpg
import structlog

from gatehouse.adapters.db.app_db import AppDatabase
from gatehouse.core.auth.types import Account, AccountRole
from gatehouse.core.exceptions import DuplicateEmail, StoreError

logger = structlog.get_logger()


class PostgresAccountRepository:
    """PostgreSQL implementation of account repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    def _row_to_account(self, row: dict[str, Any]) -> Account:
        """Convert database row to Account model."""
        return Account(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=AccountRole(row.get("role", "user")),
            reset_token=row.get("reset_token") or "",
            created_at=row["created_at"],
        )

    async def _fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        try:
            return await self._db.fetch_one(query, *args)
        except asyncpg.UniqueViolationError:
            raise DuplicateEmail() from None
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("account_store_error", error=str(e))
            raise StoreError() from e

    async def get_account_by_id(self, account_id: UUID) -> Account | None:
        """Get account by ID."""
        row = await self._fetch_one(
            "SELECT * FROM accounts WHERE id = $1",
            account_id,
        )
        return self._row_to_account(row) if row else None

    async def get_account_by_email(self, email: str) -> Account | None:
        """Get account by exact email address."""
        row = await self._fetch_one(
            "SELECT * FROM accounts WHERE email = $1",
            email,
        )
        return self._row_to_account(row) if row else None

    async def get_account_by_reset_token(self, token: str) -> Account | None:
        """Get the account holding this outstanding reset token."""
        if not token:
            return None
        row = await self._fetch_one(
            "SELECT * FROM accounts WHERE reset_token = $1",
            token,
        )
        return self._row_to_account(row) if row else None

    async def create_account(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: AccountRole = AccountRole.USER,
    ) -> Account:
        """Create a new account.

        The unique index on email decides concurrent inserts.
        """
        row = await self._fetch_one(
            """
            INSERT INTO accounts (name, email, password_hash, role)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            name,
            email,
            password_hash,
            role.value,
        )
        assert row is not None, "INSERT RETURNING should always return a row"
        return self._row_to_account(row)

    async def update_account(
        self,
        account_id: UUID,
        name: str | None = None,
        password_hash: str | None = None,
    ) -> Account | None:
        """Update account fields."""
        updates = []
        params: list[Any] = []
        param_idx = 1

        if name is not None:
            updates.append(f"name = ${param_idx}")
            params.append(name)
            param_idx += 1

        if password_hash is not None:
            updates.append(f"password_hash = ${param_idx}")
            params.append(password_hash)
            param_idx += 1

        if not updates:
            return await self.get_account_by_id(account_id)

        updates.append(f"updated_at = ${param_idx}")
        params.append(datetime.now(UTC))
        param_idx += 1

        params.append(account_id)
        query = f"""
            UPDATE accounts SET {", ".join(updates)}
            WHERE id = ${param_idx}
            RETURNING *
        """
        row = await self._fetch_one(query, *params)
        return self._row_to_account(row) if row else None

    async def set_reset_token(self, account_id: UUID, token: str) -> Account | None:
        """Store the outstanding reset token, replacing any previous one."""
        row = await self._fetch_one(
            """
            UPDATE accounts SET reset_token = $1, updated_at = NOW()
            WHERE id = $2
            RETURNING *
            """,
            token,
            account_id,
        )
        return self._row_to_account(row) if row else None

    async def consume_reset_token(self, token: str, password_hash: str) -> Account | None:
        """Compare-and-clear the reset token in a single statement."""
        if not token:
            return None
        row = await self._fetch_one(
            """
            UPDATE accounts
            SET password_hash = $1, reset_token = '', updated_at = NOW()
            WHERE reset_token = $2 AND reset_token <> ''
            RETURNING *
            """,
            password_hash,
            token,
        )
        return self._row_to_account(row) if row else None
