"""Routers exposed by the web API."""

from .lookup_routes import router as lookup_router

__all__ = ["lookup_router"]
