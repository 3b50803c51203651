"""Input shape checks shared by the auth flows."""

from email_validator import EmailNotValidError, validate_email

from gatehouse.core.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


def check_name(name: str) -> str:
    """Return the stripped name, or raise if it is empty."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def check_email(email: str) -> str:
    """Check that an email address is syntactically valid.

    The address is returned unchanged: gatehouse stores and compares
    emails exactly as given.

    Raises:
        ValidationError: If the address is malformed.
    """
    if not email:
        raise ValidationError("Must be a valid email address")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Must be a valid email address") from None
    return email


def check_password(password: str) -> str:
    """Check password length bounds.

    Raises:
        ValidationError: If the password is too short or too long.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must contain at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password
