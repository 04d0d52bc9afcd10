"""Routes for identifier-based media lookups."""

from __future__ import annotations

import math
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mediaset import logging_manager as log_mgr
from mediaset.services.lookup import (
    IdentifierKind,
    LookupService,
    LookupStatus,
    MediaType,
    UnsupportedLookupError,
)

from ..dependencies import get_lookup_service
from ..schemas.lookup import (
    IntegrationStatus,
    LookupCapabilitiesResponse,
    LookupIntegrationsResponse,
    TitleSearchResponse,
)

logger = log_mgr.get_logger().getChild("webapi.routes.lookup")

router = APIRouter(prefix="/lookup", tags=["lookup"])


def _parse_media_type(entity_type: str) -> MediaType:
    media_type = MediaType.parse(entity_type)
    if media_type is None:
        valid = ", ".join(member.value for member in MediaType)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid entity type: {entity_type}. Valid types are: {valid}",
        )
    return media_type


def _parse_identifier_kind(identifier_type: str) -> IdentifierKind:
    kind = IdentifierKind.parse(identifier_type)
    if kind is None:
        valid = ", ".join(member.value for member in IdentifierKind)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid identifier type: {identifier_type}. Valid types are: {valid}",
        )
    return kind


@router.get("/capabilities", response_model=LookupCapabilitiesResponse)
async def lookup_capabilities(
    service: LookupService = Depends(get_lookup_service),
) -> LookupCapabilitiesResponse:
    """List which identifier types each entity type can be looked up by."""

    return LookupCapabilitiesResponse(
        capabilities=service.capabilities(),
        searchable=service.searchable_media_types(),
    )


@router.get("/integrations", response_model=LookupIntegrationsResponse)
async def lookup_integrations(
    service: LookupService = Depends(get_lookup_service),
) -> LookupIntegrationsResponse:
    """Report which providers are configured."""

    return LookupIntegrationsResponse(
        integrations=[IntegrationStatus(**entry) for entry in service.integrations()]
    )


@router.get("/{entity_type}/search", response_model=TitleSearchResponse)
async def search_by_title(
    entity_type: str,
    title: str = Query(..., description="Free-text title to search for"),
    service: LookupService = Depends(get_lookup_service),
) -> TitleSearchResponse:
    """Search an entity type by title where a provider supports it."""

    media_type = _parse_media_type(entity_type)
    if not title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title must not be empty",
        )
    results = await service.search(media_type, title)
    return TitleSearchResponse(
        entity_type=media_type.value,
        title=title.strip(),
        results=[result.to_dict() for result in results],
    )


@router.get("/{entity_type}/{identifier_type}/{identifier_value}")
async def lookup_by_identifier(
    entity_type: str,
    identifier_type: str,
    identifier_value: str,
    service: LookupService = Depends(get_lookup_service),
) -> Dict[str, Any]:
    """Resolve a barcode or catalog identifier to normalized metadata.

    Returns 404 when no provider has the record and 429 when a provider
    asked us to back off, with ``Retry-After`` when the delay is known.
    """

    kind = _parse_identifier_kind(identifier_type)
    media_type = _parse_media_type(entity_type)

    try:
        outcome = await service.lookup(media_type, kind, identifier_value)
    except UnsupportedLookupError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if outcome.status is LookupStatus.RATE_LIMITED:
        headers = None
        if outcome.retry_after is not None:
            headers = {"Retry-After": str(max(0, math.ceil(outcome.retry_after)))}
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"{outcome.provider} is rate limiting requests; try again later",
            headers=headers,
        )

    if outcome.status is LookupStatus.NOT_FOUND or outcome.response is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {media_type.value} found for {kind.value} {outcome.identifier_value}",
        )

    return outcome.response.to_dict()


__all__ = ["router"]
