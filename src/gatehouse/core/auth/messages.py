"""Email bodies for the activation and password reset flows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    """A composed email ready for a Mailer."""

    to: str
    subject: str
    html_body: str


def activation_email(to: str, client_url: str, token: str) -> EmailMessage:
    """Compose the account activation email."""
    client_url = client_url.rstrip("/")
    link = f"{client_url}/users/activate/{token}"
    html_body = f"""
    <h1>Please use the following link to activate your account</h1>
    <p><a href="{link}">{link}</a></p>
    <hr />
    <p>This email may contain sensitive information</p>
    <p>{client_url}</p>
    """
    return EmailMessage(to=to, subject="Account activation link", html_body=html_body)


def password_reset_email(to: str, client_url: str, token: str) -> EmailMessage:
    """Compose the password reset email."""
    client_url = client_url.rstrip("/")
    link = f"{client_url}/users/password/reset/{token}"
    html_body = f"""
    <h1>Please use the following link to reset your password</h1>
    <p><a href="{link}">{link}</a></p>
    <hr />
    <p>This email may contain sensitive information</p>
    <p>{client_url}</p>
    """
    return EmailMessage(to=to, subject="Password Reset link", html_body=html_body)
