"""Schemas for the identifier lookup endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class LookupCapabilitiesResponse(BaseModel):
    """Identifier types accepted per entity type."""

    capabilities: Dict[str, List[str]] = Field(default_factory=dict)
    searchable: List[str] = Field(default_factory=list)


class IntegrationStatus(BaseModel):
    """Whether a provider is configured well enough to be queried."""

    provider: str
    enabled: bool
    requires_api_key: bool = False
    throttled: bool = False
    min_interval_seconds: Optional[float] = None


class LookupIntegrationsResponse(BaseModel):
    integrations: List[IntegrationStatus] = Field(default_factory=list)


class TitleSearchResponse(BaseModel):
    """Results of a free-text title search."""

    entity_type: str
    title: str
    results: List[Dict[str, Any]] = Field(default_factory=list)
