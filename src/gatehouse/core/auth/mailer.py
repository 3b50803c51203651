"""Mailer protocol.

Flows hand fully composed messages to a Mailer. Implementations:
- SmtpMailer: sends through an SMTP relay
- SendGridMailer: sends through the SendGrid web API
- ConsoleMailer: prints messages to stdout (demo/dev mode)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Mailer(Protocol):
    """Protocol for outbound email delivery."""

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Deliver a message.

        Args:
            to: Recipient address.
            subject: Message subject.
            html_body: HTML message body.

        Raises:
            DeliveryError: If the message could not be delivered.
        """
        ...
