"""Pydantic schemas for the web API."""

from .lookup import (
    IntegrationStatus,
    LookupCapabilitiesResponse,
    LookupIntegrationsResponse,
    TitleSearchResponse,
)

__all__ = [
    "IntegrationStatus",
    "LookupCapabilitiesResponse",
    "LookupIntegrationsResponse",
    "TitleSearchResponse",
]
