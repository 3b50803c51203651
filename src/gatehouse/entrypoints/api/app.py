"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gatehouse import __version__

from .deps import Settings, lifespan
from .routes import api_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API app.

    Only the browser client at CLIENT_URL may call it cross-origin.
    """
    settings = settings or Settings()

    application = FastAPI(
        title="gatehouse",
        description="Account activation, sign-in, password reset and federated login",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,  # A 307 would drop the Authorization header
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url.rstrip("/")],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Authorization", "Content-Type"],
    )
    application.include_router(api_router, prefix="/api/v1")

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Liveness check."""
        return {"status": "healthy"}

    return application


app = create_app()
