"""Auth domain types and flows."""

from gatehouse.core.auth.federated import FederatedIdentityResolver
from gatehouse.core.auth.guard import AccessGuard
from gatehouse.core.auth.mailer import Mailer
from gatehouse.core.auth.password import hash_password, verify_password
from gatehouse.core.auth.registration import RegistrationService
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.reset import PasswordResetService
from gatehouse.core.auth.session import SessionIssuer
from gatehouse.core.auth.tokens import TokenError, TokenExpired, TokenInvalid, TokenService
from gatehouse.core.auth.types import (
    Account,
    AccountRole,
    FederatedAssertion,
    PublicAccount,
    SessionResult,
    TokenPurpose,
)
from gatehouse.core.auth.verifier import AssertionVerifier

__all__ = [
    "Account",
    "AccountRole",
    "PublicAccount",
    "SessionResult",
    "FederatedAssertion",
    "TokenPurpose",
    "TokenService",
    "TokenError",
    "TokenExpired",
    "TokenInvalid",
    "hash_password",
    "verify_password",
    "AccountRepository",
    "Mailer",
    "AssertionVerifier",
    "RegistrationService",
    "SessionIssuer",
    "PasswordResetService",
    "FederatedIdentityResolver",
    "AccessGuard",
]
