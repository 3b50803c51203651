"""Tests for input shape checks."""

import pytest

from gatehouse.core.auth.validation import check_email, check_name, check_password
from gatehouse.core.exceptions import ValidationError


class TestCheckEmail:
    """Test email checks."""

    def test_valid_email_returned_unchanged(self) -> None:
        """Case is preserved; emails are not normalized."""
        assert check_email("Ann@X.com") == "Ann@X.com"

    @pytest.mark.parametrize("email", ["", "ann", "ann@", "@x.com", "a b@x.com"])
    def test_malformed_email(self, email: str) -> None:
        """Malformed addresses raise ValidationError."""
        with pytest.raises(ValidationError):
            check_email(email)


class TestCheckName:
    """Test name checks."""

    def test_strips_whitespace(self) -> None:
        """Surrounding whitespace is removed."""
        assert check_name("  Ann ") == "Ann"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name(self, name: str) -> None:
        """Blank names raise ValidationError."""
        with pytest.raises(ValidationError):
            check_name(name)


class TestCheckPassword:
    """Test password checks."""

    def test_minimum_length(self) -> None:
        """Six characters is enough."""
        assert check_password("secret") == "secret"

    def test_too_short(self) -> None:
        """Five characters is not."""
        with pytest.raises(ValidationError):
            check_password("short")

    def test_too_long(self) -> None:
        """More than 72 bytes is refused."""
        with pytest.raises(ValidationError):
            check_password("x" * 73)
