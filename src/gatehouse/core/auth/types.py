"""Auth domain types."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class AccountRole(str, Enum):
    """Account roles."""

    USER = "user"
    ADMIN = "admin"


class TokenPurpose(str, Enum):
    """What a signed token may be used for. Each purpose has its own secret."""

    ACTIVATION = "activation"
    SESSION = "session"
    RESET = "reset"


class Account(BaseModel):
    """Account domain model."""

    id: UUID
    name: str
    email: str
    password_hash: str
    role: AccountRole = AccountRole.USER
    reset_token: str = ""  # Empty when no reset is outstanding
    created_at: datetime

    def to_public(self) -> "PublicAccount":
        """Project the account without credential fields."""
        return PublicAccount(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
        )


class PublicAccount(BaseModel):
    """Account fields that may appear in a response."""

    id: UUID
    name: str
    email: str
    role: AccountRole


class SessionResult(BaseModel):
    """A freshly issued session token and the account it identifies."""

    token: str
    user: PublicAccount


class FederatedAssertion(BaseModel):
    """Identity claims vouched for by an external provider."""

    email: str
    name: str
    verified: bool = False


class PendingRegistration(BaseModel):
    """Signup payload carried inside an activation token."""

    name: str
    email: str
    password: str
