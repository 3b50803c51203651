"""SendGrid email adapter.

The API client is built from configuration passed at construction,
so each mailer owns its own client.
"""

import asyncio

import structlog
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from gatehouse.core.exceptions import DeliveryError

logger = structlog.get_logger()


class SendGridMailer:
    """Delivers email through the SendGrid web API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        client: SendGridAPIClient | None = None,
    ) -> None:
        """Initialize the SendGrid mailer.

        Args:
            api_key: SendGrid API key.
            from_email: Sender address.
            client: Preconfigured client, mainly for tests.
        """
        self._client = client or SendGridAPIClient(api_key)
        self._from_email = from_email

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Send an email through SendGrid.

        Raises:
            DeliveryError: If SendGrid rejects the message or is unreachable.
        """
        message = Mail(
            from_email=self._from_email,
            to_emails=to,
            subject=subject,
            html_content=html_body,
        )

        try:
            # The client is synchronous
            response = await asyncio.to_thread(self._client.send, message)
        except (HTTPError, OSError) as e:
            logger.error("sendgrid_error", subject=subject, error=str(e))
            raise DeliveryError() from e

        if response.status_code >= 300:
            logger.error("sendgrid_rejected", subject=subject, status=response.status_code)
            raise DeliveryError()

        logger.info("email_sent", subject=subject, status=response.status_code)

