"""Facebook access token verifier."""

from typing import Any

import httpx
import structlog

from gatehouse.core.auth.types import FederatedAssertion
from gatehouse.core.auth.verifier import AssertionVerifier
from gatehouse.core.exceptions import VerificationError

logger = structlog.get_logger()

GRAPH_API_URL = "https://graph.facebook.com/v19.0"


class FacebookAssertionVerifier:
    """Verifies Facebook Login access tokens with the Graph API.

    The raw assertion is ``{"userID": ..., "accessToken": ...}`` as
    returned by the Facebook JS SDK. The token is first inspected with
    ``debug_token`` (app id, validity, user id), then the profile is read.
    Facebook only returns an email once the user has confirmed it, so a
    present email counts as verified.
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        graph_url: str = GRAPH_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            app_id: Facebook app id; the expected audience.
            app_secret: Facebook app secret, used for the app access token.
            graph_url: Graph API base URL.
            transport: Optional httpx transport, mainly for tests.
        """
        self._app_id = app_id
        self._app_secret = app_secret
        self._graph_url = graph_url.rstrip("/")
        self._transport = transport

    @property
    def audience(self) -> str:
        """Our Facebook app id."""
        return self._app_id

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict[str, str]) -> Any:
        response = await client.get(f"{self._graph_url}/{path}", params=params)
        response.raise_for_status()
        return response.json()

    async def verify(self, raw_assertion: dict[str, str], audience: str) -> FederatedAssertion:
        """Check the access token belongs to our app and user, then read the profile.

        Raises:
            VerificationError: If the token is missing, not ours, or the
                Graph API cannot be reached.
        """
        user_id = raw_assertion.get("userID")
        access_token = raw_assertion.get("accessToken")
        if not user_id or not access_token:
            raise VerificationError("Missing Facebook user id or access token")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=10.0) as client:
                debug = await self._get(
                    client,
                    "debug_token",
                    {
                        "input_token": access_token,
                        "access_token": f"{self._app_id}|{self._app_secret}",
                    },
                )
                data = debug.get("data", {})
                if not data.get("is_valid"):
                    raise VerificationError("Facebook access token is not valid")
                if str(data.get("app_id")) != audience:
                    raise VerificationError("Facebook access token issued for another app")
                if str(data.get("user_id")) != user_id:
                    raise VerificationError("Facebook access token issued for another user")

                profile = await self._get(
                    client,
                    user_id,
                    {"fields": "id,name,email", "access_token": access_token},
                )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("facebook_graph_error", error=str(e))
            raise VerificationError(f"Facebook Graph API request failed: {e}") from None

        email = profile.get("email") or ""
        return FederatedAssertion(
            email=email,
            name=profile.get("name") or "",
            verified=bool(email),
        )


# Verify we implement the protocol
_verifier: AssertionVerifier = FacebookAssertionVerifier(app_id="", app_secret="")
