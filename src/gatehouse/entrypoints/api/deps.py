"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from gatehouse.adapters.auth.memory import InMemoryAccountRepository
from gatehouse.adapters.auth.postgres import PostgresAccountRepository
from gatehouse.adapters.db.app_db import AppDatabase
from gatehouse.adapters.identity.facebook import FacebookAssertionVerifier
from gatehouse.adapters.identity.google import GoogleAssertionVerifier
from gatehouse.adapters.notifications.console import ConsoleMailer
from gatehouse.adapters.notifications.email import EmailConfig, SmtpMailer
from gatehouse.adapters.notifications.sendgrid import SendGridMailer
from gatehouse.core.auth.federated import FederatedIdentityResolver
from gatehouse.core.auth.guard import AccessGuard
from gatehouse.core.auth.mailer import Mailer
from gatehouse.core.auth.registration import RegistrationService
from gatehouse.core.auth.repository import AccountRepository
from gatehouse.core.auth.reset import PasswordResetService
from gatehouse.core.auth.session import SessionIssuer
from gatehouse.core.auth.tokens import TokenService
from gatehouse.core.auth.types import TokenPurpose
from gatehouse.core.auth.verifier import AssertionVerifier

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()

# Development fallbacks; a warning is logged at startup when any is in use
SECRET_DEFAULTS = {
    "JWT_ACCOUNT_ACTIVATION": "dev-activation-secret-change-in-production",
    "JWT_SECRET": "dev-session-secret-change-in-production",
    "JWT_RESET_PASSWORD": "dev-reset-secret-change-in-production",
    "FEDERATED_SECRET": "dev-federated-secret-change-in-production",
}


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        # Empty means the in-memory account store
        self.database_url = os.getenv("DATABASE_URL", "")

        # One secret per token purpose, plus the federated credential key
        secrets = {name: os.getenv(name) or default for name, default in SECRET_DEFAULTS.items()}
        self.defaulted_secrets = sorted(name for name in SECRET_DEFAULTS if not os.getenv(name))
        self.jwt_account_activation = secrets["JWT_ACCOUNT_ACTIVATION"]
        self.jwt_secret = secrets["JWT_SECRET"]
        self.jwt_reset_password = secrets["JWT_RESET_PASSWORD"]
        self.federated_secret = secrets["FEDERATED_SECRET"]

        self.client_url = os.getenv("CLIENT_URL", "http://localhost:3000")

        # Mail: SendGrid when MAIL_KEY is set, else SMTP when SMTP_HOST is set, else console
        self.email_from = os.getenv("EMAIL_FROM", "no-reply@example.com")
        self.mail_key = os.getenv("MAIL_KEY", "")
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER") or None
        self.smtp_password = os.getenv("SMTP_PASSWORD") or None

        # Identity providers are enabled only when configured
        self.google_client = os.getenv("GOOGLE_CLIENT", "")
        self.facebook_app_id = os.getenv("FACEBOOK_APP_ID", "")
        self.facebook_app_secret = os.getenv("FACEBOOK_APP_SECRET", "")

    @property
    def token_secrets(self) -> dict[TokenPurpose, str]:
        """Signing secret per token purpose."""
        return {
            TokenPurpose.ACTIVATION: self.jwt_account_activation,
            TokenPurpose.SESSION: self.jwt_secret,
            TokenPurpose.RESET: self.jwt_reset_password,
        }


def build_mailer(settings: Settings) -> Mailer:
    """Pick the mailer the settings call for."""
    if settings.mail_key:
        return SendGridMailer(api_key=settings.mail_key, from_email=settings.email_from)
    if settings.smtp_host:
        return SmtpMailer(
            EmailConfig(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                smtp_user=settings.smtp_user,
                smtp_password=settings.smtp_password,
                from_email=settings.email_from,
            )
        )
    logger.warning("mailer_console_mode")
    return ConsoleMailer()


def build_verifiers(settings: Settings) -> dict[str, AssertionVerifier]:
    """Build an assertion verifier for every configured identity provider."""
    verifiers: dict[str, AssertionVerifier] = {}
    if settings.google_client:
        verifiers["google"] = GoogleAssertionVerifier(client_id=settings.google_client)
    if settings.facebook_app_id and settings.facebook_app_secret:
        verifiers["facebook"] = FacebookAssertionVerifier(
            app_id=settings.facebook_app_id,
            app_secret=settings.facebook_app_secret,
        )
    return verifiers


def wire_services(
    app: FastAPI,
    settings: Settings,
    repo: AccountRepository,
    mailer: Mailer,
    verifiers: dict[str, AssertionVerifier],
) -> None:
    """Build the auth flows and store them in app state."""
    tokens = TokenService(settings.token_secrets)
    sessions = SessionIssuer(repo, tokens)

    app.state.account_repo = repo
    app.state.tokens = tokens
    app.state.sessions = sessions
    app.state.registration = RegistrationService(repo, tokens, mailer, settings.client_url)
    app.state.password_reset = PasswordResetService(repo, tokens, mailer, settings.client_url)
    app.state.federated = FederatedIdentityResolver(
        repo,
        sessions,
        verifiers,
        server_secret=settings.federated_secret,
    )
    app.state.guard = AccessGuard(repo, tokens)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Account store setup (PostgreSQL pool or in-memory)
    - Mailer and identity provider configuration
    - Auth flow wiring
    """
    settings = Settings()
    if settings.defaulted_secrets:
        logger.warning("token_secrets_default", variables=settings.defaulted_secrets)

    app_db: AppDatabase | None = None
    repo: AccountRepository
    if settings.database_url:
        app_db = AppDatabase(settings.database_url)
        await app_db.connect()
        await app_db.ensure_schema()
        repo = PostgresAccountRepository(app_db)
    else:
        logger.warning("account_store_in_memory")
        repo = InMemoryAccountRepository()

    verifiers = build_verifiers(settings)
    wire_services(app, settings, repo, build_mailer(settings), verifiers)
    logger.info("auth_services_ready", providers=sorted(verifiers))

    yield

    if app_db is not None:
        await app_db.close()


def get_registration_service(request: Request) -> RegistrationService:
    """Get the registration flow from app state."""
    service: RegistrationService = request.app.state.registration
    return service


def get_session_issuer(request: Request) -> SessionIssuer:
    """Get the session issuer from app state."""
    service: SessionIssuer = request.app.state.sessions
    return service


def get_password_reset_service(request: Request) -> PasswordResetService:
    """Get the password reset flow from app state."""
    service: PasswordResetService = request.app.state.password_reset
    return service


def get_federated_resolver(request: Request) -> FederatedIdentityResolver:
    """Get the federated identity resolver from app state."""
    service: FederatedIdentityResolver = request.app.state.federated
    return service


def get_access_guard(request: Request) -> AccessGuard:
    """Get the access guard from app state."""
    guard: AccessGuard = request.app.state.guard
    return guard
