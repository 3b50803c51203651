"""Domain-specific exceptions.

All exceptions in the gatehouse system inherit from GatehouseError,
making it easy to catch all system errors while still being able
to handle specific error types.

Each error carries the user-facing message and the HTTP status the
API layer responds with. Sign-in failures never say whether the
account exists, and link failures never say whether the token expired
or failed its signature check.
"""

from __future__ import annotations


class GatehouseError(Exception):
    """Base exception for all gatehouse errors."""

    status_code: int = 400
    default_message: str = "Something went wrong. Try again."

    def __init__(self, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: User-facing message. Falls back to the class default.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GatehouseError):
    """Input failed basic shape checks. Recoverable by the caller."""

    status_code = 422
    default_message = "Invalid input"


class Conflict(GatehouseError):
    """The requested change collides with existing state."""

    status_code = 400
    default_message = "Conflict"


class EmailTaken(Conflict):
    """An account already uses this email address."""

    default_message = "Email is taken"


class NotFound(GatehouseError):
    """No matching account."""

    status_code = 400
    default_message = "User with that email does not exist"


class ExpiredOrInvalid(GatehouseError):
    """A token failed its signature, expiry, purpose or stored-value check."""

    status_code = 400
    default_message = "Expired or invalid link. Try again."


class InvalidCredentials(GatehouseError):
    """Email and password do not match, or the account does not exist.

    The two cases are intentionally indistinguishable.
    """

    status_code = 400
    default_message = "Email and password do not match or user does not exist"


class Unauthorized(GatehouseError):
    """Missing, expired or invalid session token."""

    status_code = 401
    default_message = "Unauthorized"


class Forbidden(GatehouseError):
    """Authenticated, but the account lacks the required role."""

    status_code = 403
    default_message = "Admin resource. Access denied."


class UnverifiedAssertion(GatehouseError):
    """The identity provider did not vouch for the email address."""

    status_code = 400
    default_message = "Login failed. Try again"


class AssertionVerificationFailed(GatehouseError):
    """The identity provider assertion could not be verified."""

    status_code = 400
    default_message = "Login failed"


# Collaborator failures


class DeliveryError(GatehouseError):
    """The mailer could not deliver a message."""

    status_code = 502
    default_message = "Email could not be sent. Try again."


class VerificationError(GatehouseError):
    """An assertion verifier rejected or could not check an assertion.

    Raised by verifier adapters; flows translate it into
    AssertionVerificationFailed.
    """

    default_message = "Assertion verification failed"


class StoreError(GatehouseError):
    """The account store failed."""

    status_code = 500
    default_message = "Something went wrong. Try again."


class DuplicateEmail(StoreError):
    """The store rejected a write that would duplicate an email address."""

    status_code = 400
    default_message = "Email is taken"
