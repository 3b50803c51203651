"""Account database connection pool using asyncpg."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg
import structlog

logger = structlog.get_logger()

# Email uniqueness is enforced here, not in application code
SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
    reset_token TEXT NOT NULL DEFAULT '',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS accounts_email_key ON accounts (email);
CREATE INDEX IF NOT EXISTS accounts_reset_token_idx ON accounts (reset_token)
    WHERE reset_token <> '';
"""


class AppDatabase:
    """Pool of connections to the database holding account records."""

    def __init__(self, dsn: str, min_size: int = 2, max_size: int = 10):
        """Initialize without connecting.

        Args:
            dsn: PostgreSQL connection string.
            min_size: Minimum pooled connections.
            max_size: Maximum pooled connections.
        """
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Open the pool."""
        self.pool = await asyncpg.create_pool(
            self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=30,
        )
        # Never log credentials
        logger.info("account_database_connected", host=self.dsn.rsplit("@", 1)[-1])

    async def close(self) -> None:
        """Close the pool if it was opened."""
        if self.pool is None:
            return
        await self.pool.close()
        self.pool = None
        logger.info("account_database_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a pooled connection."""
        if self.pool is None:
            raise RuntimeError("Database pool not initialized; call connect() first")
        async with self.pool.acquire() as conn:
            yield conn

    async def ensure_schema(self) -> None:
        """Create the accounts table and its indexes when missing."""
        async with self.acquire() as conn:
            await conn.execute(SCHEMA)
        logger.info("account_schema_ready")

    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Run a query and return its first row as a dict, or None."""
        async with self.acquire() as conn:
            row = await conn.fetchrow(query, *args)
        return dict(row) if row is not None else None
