"""Application factory for the lookup web API."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from mediaset import __version__
from mediaset import logging_manager as log_mgr
from mediaset.config_manager import get_settings

from .dependencies import close_lookup_service
from .routes import lookup_router

LOGGER = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    app = FastAPI(title="mediaset lookup API", version=__version__)

    @app.on_event("startup")
    async def _prepare_runtime() -> None:
        settings = get_settings()
        log_mgr.configure_logging_level(log_level=settings.log_level)

    @app.on_event("shutdown")
    async def _cleanup_runtime() -> None:
        try:
            await close_lookup_service()
        except Exception:  # pragma: no cover
            LOGGER.exception("Failed to close lookup service clients")

    @app.get("/_health", tags=["health"])
    def healthcheck() -> dict[str, str]:
        """Simple healthcheck endpoint for smoke-testing the server."""

        return {"status": "ok"}

    app.include_router(lookup_router)
    return app


__all__ = ["create_app"]
