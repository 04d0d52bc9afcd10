"""Strategy registry and wiring of provider clients from settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import httpx
from pydantic import SecretStr

from mediaset import logging_manager as log_mgr
from mediaset.config_manager import ConfigurationError, LookupSettings, get_settings

from .clients.base import BaseLookupClient
from .clients.giantbomb import GiantBombClient
from .clients.igdb import IgdbClient, IgdbTokenService
from .clients.musicbrainz import MusicBrainzClient
from .clients.openlibrary import OpenLibraryClient
from .clients.tmdb import TmdbClient
from .clients.upcitemdb import UpcItemDbClient
from .errors import UnsupportedLookupError
from .rate_limiter import RateLimiter
from .strategies import (
    BookLookupStrategy,
    GameLookupStrategy,
    LookupStrategy,
    MovieLookupStrategy,
    MusicLookupStrategy,
)
from .types import IdentifierKind, LookupProvider, MediaType

logger = log_mgr.get_logger().getChild("services.lookup.factory")

GameCatalogClient = Union[GiantBombClient, IgdbClient]


class LookupStrategyFactory:
    """Resolve the strategy registered for a media type and identifier kind.

    Strategies are scanned in registration order and the first whose
    ``can_handle`` accepts the pair wins. Registering two strategies for the
    same pair is rejected up front so dispatch never depends on ordering.
    """

    def __init__(self, strategies: Iterable[LookupStrategy]) -> None:
        self._strategies: List[LookupStrategy] = list(strategies)
        owners: Dict[Tuple[MediaType, IdentifierKind], LookupStrategy] = {}
        for strategy in self._strategies:
            for kind in strategy.supported_identifiers:
                key = (strategy.media_type, kind)
                if key in owners:
                    raise ConfigurationError(
                        f"Both {type(owners[key]).__name__} and {type(strategy).__name__} "
                        f"handle {strategy.media_type.value} with identifier type: {kind.value}"
                    )
                owners[key] = strategy

    @property
    def strategies(self) -> Sequence[LookupStrategy]:
        return tuple(self._strategies)

    def get_strategy(
        self, media_type: MediaType, identifier_kind: IdentifierKind
    ) -> LookupStrategy:
        """Return the strategy for ``(media_type, identifier_kind)``.

        Raises:
            UnsupportedLookupError: If no registered strategy handles the pair.
        """
        for strategy in self._strategies:
            if strategy.can_handle(media_type, identifier_kind):
                return strategy
        raise UnsupportedLookupError(media_type, identifier_kind)

    def find_title_search(self, media_type: MediaType) -> Optional[LookupStrategy]:
        for strategy in self._strategies:
            if strategy.media_type == media_type and strategy.supports_title_search:
                return strategy
        return None

    def supported_pairs(self) -> List[Tuple[MediaType, IdentifierKind]]:
        """List every supported pair, grouped by media type in enum order."""
        pairs: List[Tuple[MediaType, IdentifierKind]] = []
        for media_type in MediaType:
            for kind in IdentifierKind:
                if any(strategy.can_handle(media_type, kind) for strategy in self._strategies):
                    pairs.append((media_type, kind))
        return pairs


@dataclass(slots=True)
class LookupClients:
    """The provider clients one lookup service talks to."""

    openlibrary: OpenLibraryClient
    upcitemdb: UpcItemDbClient
    tmdb: TmdbClient
    games: GameCatalogClient
    musicbrainz: MusicBrainzClient

    def all(self) -> List[BaseLookupClient]:
        return [self.openlibrary, self.upcitemdb, self.tmdb, self.games, self.musicbrainz]

    def by_provider(self) -> Dict[LookupProvider, BaseLookupClient]:
        return {client.name: client for client in self.all()}

    async def aclose(self) -> None:
        for client in self.all():
            await client.aclose()


def _secret(value: Optional[SecretStr]) -> Optional[str]:
    if value is None:
        return None
    secret = value.get_secret_value().strip()
    return secret or None


def _build_game_catalog(
    settings: LookupSettings, http_client: Optional[httpx.AsyncClient]
) -> GameCatalogClient:
    if settings.game_provider == LookupProvider.IGDB.value:
        igdb = settings.igdb
        client_id = (igdb.client_id or "").strip()
        token_service = IgdbTokenService(
            client_id=client_id,
            client_secret=_secret(igdb.client_secret) or "",
            token_url=igdb.token_url,
            http_client=http_client,
            timeout_seconds=igdb.timeout_seconds,
        )
        return IgdbClient(
            token_service=token_service,
            client_id=client_id,
            base_url=igdb.base_url,
            http_client=http_client,
            timeout_seconds=igdb.timeout_seconds,
            user_agent=settings.user_agent,
        )

    giantbomb = settings.giantbomb
    return GiantBombClient(
        base_url=giantbomb.base_url,
        http_client=http_client,
        api_key=_secret(giantbomb.api_key),
        timeout_seconds=giantbomb.timeout_seconds,
        user_agent=settings.user_agent,
    )


def build_clients(
    settings: Optional[LookupSettings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> LookupClients:
    """Instantiate every provider client from ``settings``.

    Args:
        settings: Lookup settings; the cached process settings when omitted.
        http_client: Shared ``httpx.AsyncClient``. When omitted each client
            creates and owns its own.

    Returns:
        The clients, each wired with its provider's rate limiter where one
        applies. Limiters are created here once and are shared by every
        strategy that uses the client.
    """
    settings = settings or get_settings()

    upc = settings.upcitemdb
    upc_limiter = RateLimiter(
        upc.min_delay_seconds,
        name=LookupProvider.UPCITEMDB.value,
        max_per_minute=upc.max_requests_per_minute,
        max_per_day=upc.max_requests_per_day,
        max_wait_seconds=upc.max_retry_pause_seconds,
    )
    musicbrainz = settings.musicbrainz
    musicbrainz_limiter = RateLimiter(
        musicbrainz.min_interval_seconds, name=LookupProvider.MUSICBRAINZ.value
    )

    clients = LookupClients(
        openlibrary=OpenLibraryClient(
            base_url=settings.openlibrary.base_url,
            http_client=http_client,
            timeout_seconds=settings.openlibrary.timeout_seconds,
            user_agent=settings.user_agent,
        ),
        upcitemdb=UpcItemDbClient(
            base_url=upc.base_url,
            http_client=http_client,
            timeout_seconds=upc.timeout_seconds,
            user_agent=settings.user_agent,
            rate_limiter=upc_limiter,
        ),
        tmdb=TmdbClient(
            base_url=settings.tmdb.base_url,
            http_client=http_client,
            api_key=_secret(settings.tmdb.api_key),
            timeout_seconds=settings.tmdb.timeout_seconds,
            user_agent=settings.user_agent,
        ),
        games=_build_game_catalog(settings, http_client),
        musicbrainz=MusicBrainzClient(
            base_url=musicbrainz.base_url,
            http_client=http_client,
            timeout_seconds=musicbrainz.timeout_seconds,
            user_agent=musicbrainz.user_agent,
            rate_limiter=musicbrainz_limiter,
        ),
    )
    for client in clients.all():
        if not client.is_available:
            logger.warning(
                "%s is missing credentials; its lookups will return no results",
                client.name.value,
                extra={"event": "lookup.factory.client_unavailable", "provider": client.name.value},
            )
    return clients


def create_strategy_factory(clients: LookupClients) -> LookupStrategyFactory:
    """Register the built-in strategies over ``clients``."""
    return LookupStrategyFactory(
        [
            BookLookupStrategy(clients.openlibrary, clients.upcitemdb),
            MovieLookupStrategy(clients.upcitemdb, clients.tmdb),
            GameLookupStrategy(clients.upcitemdb, clients.games),
            MusicLookupStrategy(clients.musicbrainz),
        ]
    )


__all__ = [
    "GameCatalogClient",
    "LookupClients",
    "LookupStrategyFactory",
    "build_clients",
    "create_strategy_factory",
]
