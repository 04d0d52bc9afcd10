"""Dependency providers shared by the FastAPI routes."""

from __future__ import annotations

from functools import lru_cache

from mediaset.services.lookup import LookupService, create_lookup_service


@lru_cache
def get_lookup_service() -> LookupService:
    """Return the process-wide :class:`LookupService`."""

    return create_lookup_service()


async def close_lookup_service() -> None:
    """Close the cached service, if one was created, and forget it."""

    if get_lookup_service.cache_info().currsize == 0:
        return
    service = get_lookup_service()
    get_lookup_service.cache_clear()
    await service.aclose()


__all__ = ["close_lookup_service", "get_lookup_service"]
