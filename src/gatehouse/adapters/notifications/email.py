"""SMTP email adapter."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

from gatehouse.core.auth.mailer import Mailer
from gatehouse.core.exceptions import DeliveryError

logger = structlog.get_logger()


@dataclass
class EmailConfig:
    """Email configuration."""

    smtp_host: str
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    from_email: str = "no-reply@example.com"
    from_name: str = "Gatehouse"
    use_tls: bool = True


class SmtpMailer:
    """Delivers email through an SMTP relay."""

    def __init__(self, config: EmailConfig):
        """Initialize the SMTP mailer.

        Args:
            config: Email configuration settings.
        """
        self.config = config

    def _send_sync(self, to: str, subject: str, html_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.config.from_name} <{self.config.from_email}>"
        msg["To"] = to
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port) as server:
            if self.config.use_tls:
                server.starttls()

            if self.config.smtp_user and self.config.smtp_password:
                server.login(self.config.smtp_user, self.config.smtp_password)

            server.sendmail(self.config.from_email, [to], msg.as_string())

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Send an email without blocking the event loop.

        Raises:
            DeliveryError: If the SMTP exchange fails.
        """
        try:
            await asyncio.to_thread(self._send_sync, to, subject, html_body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_error", subject=subject, error=str(e))
            raise DeliveryError() from e

        logger.info("email_sent", subject=subject)


# Verify we implement the protocol
_mailer: Mailer = SmtpMailer(EmailConfig(smtp_host="localhost"))
