"""Password hashing utilities using bcrypt."""

import hashlib
import hmac

import bcrypt

# Checked against when an account is unknown so sign-in timing is uniform
_DUMMY_HASH = bcrypt.hashpw(b"gatehouse-timing-equalizer", bcrypt.gensalt()).decode("utf-8")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password to check
        hashed_password: Bcrypt hash to check against. When None, a dummy
            hash is checked and the result is always False.

    Returns:
        True if password matches hash
    """
    candidate = hashed_password or _DUMMY_HASH
    try:
        matched = bcrypt.checkpw(plain_password.encode("utf-8"), candidate.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash, or input over bcrypt's 72-byte limit
        return False
    return matched and hashed_password is not None and bool(plain_password)


def derive_federated_password(email: str, server_secret: str) -> str:
    """Derive the credential for an account created from a federated login.

    The value is reproducible by the server, unknown to the client and
    never checked against user input. It only exists so every account
    has a credential.

    Args:
        email: Account email address.
        server_secret: Secret held only by the server.

    Returns:
        Hex-encoded HMAC-SHA256 of the email.
    """
    return hmac.new(
        server_secret.encode("utf-8"),
        email.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
