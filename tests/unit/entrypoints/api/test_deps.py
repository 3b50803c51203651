"""Unit tests for settings and service wiring."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from gatehouse.adapters.auth.memory import InMemoryAccountRepository
from gatehouse.adapters.identity.facebook import FacebookAssertionVerifier
from gatehouse.adapters.identity.google import GoogleAssertionVerifier
from gatehouse.adapters.notifications.console import ConsoleMailer
from gatehouse.adapters.notifications.email import SmtpMailer
from gatehouse.adapters.notifications.sendgrid import SendGridMailer
from gatehouse.core.auth.password import derive_federated_password, verify_password
from gatehouse.core.auth.types import FederatedAssertion, TokenPurpose
from gatehouse.entrypoints.api.app import create_app
from gatehouse.entrypoints.api.deps import (
    Settings,
    build_mailer,
    build_verifiers,
    lifespan,
    wire_services,
)

ENV_VARS = [
    "DATABASE_URL",
    "JWT_ACCOUNT_ACTIVATION",
    "JWT_SECRET",
    "JWT_RESET_PASSWORD",
    "FEDERATED_SECRET",
    "MAIL_KEY",
    "SMTP_HOST",
    "GOOGLE_CLIENT",
    "FACEBOOK_APP_ID",
    "FACEBOOK_APP_SECRET",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear settings that switch adapters on."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_distinct_default_secrets(self) -> None:
        """Each token purpose gets its own secret."""
        secrets = Settings().token_secrets

        assert set(secrets) == set(TokenPurpose)
        assert len(set(secrets.values())) == 3

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Values come from the environment."""
        monkeypatch.setenv("JWT_SECRET", "s3ssion")
        monkeypatch.setenv("CLIENT_URL", "https://app.example.com")
        monkeypatch.setenv("SMTP_PORT", "2525")

        settings = Settings()

        assert settings.token_secrets[TokenPurpose.SESSION] == "s3ssion"
        assert settings.client_url == "https://app.example.com"
        assert settings.smtp_port == 2525

    def test_federated_secret_is_separate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The federated credential key is its own setting, not a token secret."""
        assert Settings().federated_secret not in Settings().token_secrets.values()

        monkeypatch.setenv("FEDERATED_SECRET", "fed-key")

        assert Settings().federated_secret == "fed-key"

    def test_defaulted_secrets(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset secrets are reported by variable name."""
        monkeypatch.setenv("JWT_SECRET", "s3ssion")

        assert Settings().defaulted_secrets == [
            "FEDERATED_SECRET",
            "JWT_ACCOUNT_ACTIVATION",
            "JWT_RESET_PASSWORD",
        ]


class TestBuildMailer:
    """Tests for build_mailer."""

    def test_console_by_default(self) -> None:
        """Without mail settings messages go to the console."""
        assert isinstance(build_mailer(Settings()), ConsoleMailer)

    def test_smtp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """SMTP_HOST selects the SMTP mailer."""
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")

        assert isinstance(build_mailer(Settings()), SmtpMailer)

    def test_sendgrid_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """MAIL_KEY selects SendGrid even when SMTP is configured."""
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
        monkeypatch.setenv("MAIL_KEY", "SG.key")

        assert isinstance(build_mailer(Settings()), SendGridMailer)


class TestBuildVerifiers:
    """Tests for build_verifiers."""

    def test_none_configured(self) -> None:
        """No provider settings means no federated login."""
        assert build_verifiers(Settings()) == {}

    def test_both_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Each configured provider gets a verifier."""
        monkeypatch.setenv("GOOGLE_CLIENT", "client-id")
        monkeypatch.setenv("FACEBOOK_APP_ID", "1234")
        monkeypatch.setenv("FACEBOOK_APP_SECRET", "app-secret")

        verifiers = build_verifiers(Settings())

        assert isinstance(verifiers["google"], GoogleAssertionVerifier)
        assert isinstance(verifiers["facebook"], FacebookAssertionVerifier)
        assert verifiers["facebook"].audience == "1234"

    def test_facebook_needs_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An app id without its secret is not enough."""
        monkeypatch.setenv("FACEBOOK_APP_ID", "1234")

        assert "facebook" not in build_verifiers(Settings())


class TestWiring:
    """Tests for wire_services and lifespan."""

    def test_wire_services(self) -> None:
        """All flows are stored on app state and share one store."""
        app = FastAPI()
        repo = InMemoryAccountRepository()

        wire_services(app, Settings(), repo, ConsoleMailer(), {})

        assert app.state.account_repo is repo
        assert app.state.federated.providers == []
        for name in ("registration", "sessions", "password_reset", "guard", "tokens"):
            assert getattr(app.state, name) is not None

    def test_lifespan_without_database(self) -> None:
        """Without DATABASE_URL the app runs on the in-memory store."""
        app = FastAPI(lifespan=lifespan)

        with TestClient(app):
            assert isinstance(app.state.account_repo, InMemoryAccountRepository)

    def test_lifespan_warns_on_default_secrets(self) -> None:
        """Starting with built-in secrets logs a warning naming them."""
        with capture_logs() as logs, TestClient(FastAPI(lifespan=lifespan)):
            pass

        warnings = [e for e in logs if e["event"] == "token_secrets_default"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert "JWT_SECRET" in warnings[0]["variables"]

    def test_lifespan_quiet_with_configured_secrets(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """No warning once every secret is configured."""
        for name in ("JWT_ACCOUNT_ACTIVATION", "JWT_SECRET", "JWT_RESET_PASSWORD"):
            monkeypatch.setenv(name, f"{name.lower()}-value")
        monkeypatch.setenv("FEDERATED_SECRET", "fed-key")

        with capture_logs() as logs, TestClient(FastAPI(lifespan=lifespan)):
            pass

        assert not [e for e in logs if e["event"] == "token_secrets_default"]

    async def test_federated_credential_uses_federated_secret(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Federated accounts are keyed with FEDERATED_SECRET, not the session secret."""
        monkeypatch.setenv("JWT_SECRET", "session-key")
        monkeypatch.setenv("FEDERATED_SECRET", "fed-key")
        verifier = MagicMock()
        verifier.audience = "client-id"
        verifier.verify = AsyncMock(
            return_value=FederatedAssertion(email="g@x.com", name="Gee", verified=True)
        )
        app = FastAPI()
        repo = InMemoryAccountRepository()
        wire_services(app, Settings(), repo, ConsoleMailer(), {"google": verifier})

        await app.state.federated.sign_in_with_assertion("google", {"idToken": "jwt"})

        account = await repo.get_account_by_email("g@x.com")
        assert account is not None
        assert verify_password(
            derive_federated_password("g@x.com", "fed-key"), account.password_hash
        )
        assert not verify_password(
            derive_federated_password("g@x.com", "session-key"), account.password_hash
        )


class TestCreateApp:
    """Tests for create_app."""

    def test_health(self) -> None:
        """GET /health answers without any backing services."""
        response = TestClient(create_app()).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_cors_allows_client_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only the configured client origin is allowed cross-origin."""
        monkeypatch.setenv("CLIENT_URL", "https://app.example.com/")
        client = TestClient(create_app())

        allowed = client.options(
            "/health",
            headers={"Origin": "https://app.example.com", "Access-Control-Request-Method": "GET"},
        )
        denied = client.options(
            "/health",
            headers={"Origin": "https://evil.example.com", "Access-Control-Request-Method": "GET"},
        )

        assert allowed.headers["access-control-allow-origin"] == "https://app.example.com"
        assert "access-control-allow-origin" not in denied.headers
