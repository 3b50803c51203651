"""ASGI entrypoint for platforms that look for ``app`` at the repo root."""

from gatehouse.entrypoints.api.app import app

__all__ = ["app"]
