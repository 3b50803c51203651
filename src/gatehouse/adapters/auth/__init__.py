"""Account store adapters."""

from gatehouse.adapters.auth.memory import InMemoryAccountRepository
from gatehouse.adapters.auth.postgres import PostgresAccountRepository

__all__ = ["InMemoryAccountRepository", "PostgresAccountRepository"]
