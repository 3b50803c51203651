"""Google ID token verifier."""

import asyncio
from typing import Any

import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.id_token
import requests
import structlog

from gatehouse.core.auth.types import FederatedAssertion
from gatehouse.core.auth.verifier import AssertionVerifier
from gatehouse.core.exceptions import VerificationError

logger = structlog.get_logger()


class GoogleAssertionVerifier:
    """Verifies Google Sign-In ID tokens.

    The raw assertion is ``{"idToken": "<jwt>"}`` as posted by the
    Google Sign-In client library.
    """

    def __init__(self, client_id: str, session: requests.Session | None = None) -> None:
        """Initialize the verifier.

        Args:
            client_id: OAuth client id the ID tokens must be issued for.
            session: HTTP session used to fetch Google's signing certs;
                created on first verification when omitted.
        """
        self._client_id = client_id
        self._session = session

    @property
    def audience(self) -> str:
        """Our OAuth client id."""
        return self._client_id

    def _verify_sync(self, id_token: str, audience: str) -> dict[str, Any]:
        if self._session is None:
            self._session = requests.Session()
        request = google.auth.transport.requests.Request(session=self._session)
        return google.oauth2.id_token.verify_oauth2_token(id_token, request, audience)

    async def verify(self, raw_assertion: dict[str, str], audience: str) -> FederatedAssertion:
        """Verify the ID token's signature, audience and expiry.

        Raises:
            VerificationError: If the token is missing, invalid, or Google's
                certificates could not be fetched.
        """
        id_token = raw_assertion.get("idToken")
        if not id_token:
            raise VerificationError("Missing Google ID token")

        try:
            idinfo = await asyncio.to_thread(self._verify_sync, id_token, audience)
        except (ValueError, google.auth.exceptions.GoogleAuthError) as e:
            logger.warning("google_id_token_invalid", error=str(e))
            raise VerificationError(f"Google ID token rejected: {e}") from None

        if not idinfo or not idinfo.get("email"):
            raise VerificationError("Google ID token carries no email")

        return FederatedAssertion(
            email=idinfo["email"],
            name=idinfo.get("name") or "",
            verified=bool(idinfo.get("email_verified", False)),
        )


# Verify we implement the protocol
_verifier: AssertionVerifier = GoogleAssertionVerifier(client_id="")
