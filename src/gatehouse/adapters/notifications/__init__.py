"""Mailer adapters."""

from gatehouse.adapters.notifications.console import ConsoleMailer
from gatehouse.adapters.notifications.email import EmailConfig, SmtpMailer
from gatehouse.adapters.notifications.sendgrid import SendGridMailer

__all__ = ["ConsoleMailer", "EmailConfig", "SmtpMailer", "SendGridMailer"]
