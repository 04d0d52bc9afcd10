"""Entry point used by the API: dispatch a lookup and report its outcome."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from mediaset import logging_manager as log_mgr
from mediaset.config_manager import LookupSettings, get_settings

from .errors import RateLimitedError
from .factory import LookupClients, LookupStrategyFactory, build_clients, create_strategy_factory
from .types import IdentifierKind, LookupResponse, MediaType

logger = log_mgr.get_logger().getChild("services.lookup.service")


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True, slots=True)
class LookupOutcome:
    """Result of one lookup.

    ``response`` is set only when ``status`` is FOUND. A RATE_LIMITED outcome
    names the provider that refused the request, so callers can back off
    instead of treating the record as missing.
    """

    status: LookupStatus
    media_type: MediaType
    identifier_kind: IdentifierKind
    identifier_value: str
    response: Optional[LookupResponse] = None
    provider: Optional[str] = None
    status_code: Optional[int] = None
    retry_after: Optional[float] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "status": self.status.value,
            "media_type": self.media_type.value,
            "identifier_kind": self.identifier_kind.value,
            "identifier_value": self.identifier_value,
            "response": self.response.to_dict() if self.response is not None else None,
            "provider": self.provider,
            "status_code": self.status_code,
            "retry_after": self.retry_after,
        }


class LookupService:
    """Run lookups through the registered strategies.

    The service owns its clients and must be closed with :meth:`aclose`.
    Unsupported media/identifier combinations raise
    :class:`~mediaset.services.lookup.errors.UnsupportedLookupError`; a
    cancelled caller sees :class:`asyncio.CancelledError`.
    """

    def __init__(
        self,
        factory: LookupStrategyFactory,
        clients: Optional[LookupClients] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._factory = factory
        self._clients = clients
        self._http_client = http_client

    @property
    def factory(self) -> LookupStrategyFactory:
        return self._factory

    async def lookup(
        self, media_type: MediaType, identifier_kind: IdentifierKind, identifier_value: str
    ) -> LookupOutcome:
        """Resolve an identifier to normalized metadata.

        Args:
            media_type: Kind of media being looked up.
            identifier_kind: Kind of identifier supplied.
            identifier_value: The identifier itself; surrounding whitespace is ignored.

        Returns:
            A FOUND, NOT_FOUND or RATE_LIMITED outcome.
        """
        value = identifier_value.strip()
        strategy = self._factory.get_strategy(media_type, identifier_kind)
        started = time.perf_counter()
        with log_mgr.correlation_scope(
            media_type=media_type.value, identifier_kind=identifier_kind.value
        ):
            try:
                response = await strategy.lookup(identifier_kind, value)
            except RateLimitedError as exc:
                logger.warning(
                    "Lookup %s:%s rate limited by %s",
                    identifier_kind.value,
                    value,
                    exc.provider,
                    extra={
                        "event": "lookup.service.rate_limited",
                        "provider": exc.provider,
                        "status": LookupStatus.RATE_LIMITED.value,
                    },
                )
                return LookupOutcome(
                    status=LookupStatus.RATE_LIMITED,
                    media_type=media_type,
                    identifier_kind=identifier_kind,
                    identifier_value=value,
                    provider=exc.provider,
                    status_code=exc.status_code,
                    retry_after=exc.retry_after,
                )

            status = LookupStatus.FOUND if response is not None else LookupStatus.NOT_FOUND
            logger.info(
                "Lookup %s:%s finished: %s",
                identifier_kind.value,
                value,
                status.value,
                extra={
                    "event": "lookup.service.completed",
                    "status": status.value,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
        return LookupOutcome(
            status=status,
            media_type=media_type,
            identifier_kind=identifier_kind,
            identifier_value=value,
            response=response,
        )

    async def search(self, media_type: MediaType, title: str) -> List[LookupResponse]:
        """Free-text title search for media types that support it.

        Returns an empty list when the media type has no title search.
        """
        strategy = self._factory.find_title_search(media_type)
        if strategy is None or not title.strip():
            return []
        with log_mgr.log_context(media_type=media_type.value):
            results = await strategy.search_by_title(title.strip())
            logger.info(
                "Title search for %r returned %s result(s)",
                title,
                len(results),
                extra={"event": "lookup.service.search"},
            )
        return list(results)

    def capabilities(self) -> Dict[str, List[str]]:
        """Map each media type to the identifier kinds it can be looked up by."""
        capabilities: Dict[str, List[str]] = {}
        for media_type, kind in self._factory.supported_pairs():
            capabilities.setdefault(media_type.value, []).append(kind.value)
        return capabilities

    def searchable_media_types(self) -> List[str]:
        return [
            media_type.value
            for media_type in MediaType
            if self._factory.find_title_search(media_type) is not None
        ]

    def integrations(self) -> List[Dict[str, Any]]:
        """Describe each configured provider without exposing credentials."""
        if self._clients is None:
            return []
        entries: List[Dict[str, Any]] = []
        for client in self._clients.all():
            limiter = client.rate_limiter
            entries.append(
                {
                    "provider": client.name.value,
                    "enabled": client.is_available,
                    "requires_api_key": client.requires_api_key,
                    "throttled": limiter is not None,
                    "min_interval_seconds": limiter.min_interval_seconds if limiter else None,
                }
            )
        return entries

    async def aclose(self) -> None:
        if self._clients is not None:
            await self._clients.aclose()
        if self._http_client is not None:
            await self._http_client.aclose()


def create_lookup_service(
    settings: Optional[LookupSettings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> LookupService:
    """Build a service with every provider client wired from settings.

    When ``http_client`` is omitted one ``httpx.AsyncClient`` is created,
    shared by all clients and closed by :meth:`LookupService.aclose`.
    """
    settings = settings or get_settings()
    owned_client: Optional[httpx.AsyncClient] = None
    if http_client is None:
        owned_client = httpx.AsyncClient(follow_redirects=True)
        http_client = owned_client
    clients = build_clients(settings, http_client=http_client)
    factory = create_strategy_factory(clients)
    logger.info(
        "Lookup service ready (game catalog: %s)",
        settings.game_provider,
        extra={"event": "lookup.service.ready"},
    )
    return LookupService(factory, clients, http_client=owned_client)


__all__ = ["LookupOutcome", "LookupService", "LookupStatus", "create_lookup_service"]
