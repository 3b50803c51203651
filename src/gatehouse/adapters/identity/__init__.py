"""Identity provider assertion verifiers."""

from gatehouse.adapters.identity.facebook import FacebookAssertionVerifier
from gatehouse.adapters.identity.google import GoogleAssertionVerifier

__all__ = ["FacebookAssertionVerifier", "GoogleAssertionVerifier"]
