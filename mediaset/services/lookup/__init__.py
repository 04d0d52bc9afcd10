"""Barcode and identifier lookups across OpenLibrary, UPCitemdb, TMDB,
GiantBomb/IGDB and MusicBrainz."""

from .errors import MediaLookupError, RateLimitedError, UnsupportedLookupError
from .factory import LookupClients, LookupStrategyFactory, build_clients, create_strategy_factory
from .service import LookupOutcome, LookupService, LookupStatus, create_lookup_service
from .types import (
    BookResponse,
    GameResponse,
    IdentifierKind,
    LookupProvider,
    LookupResponse,
    MediaType,
    MovieResponse,
    MusicResponse,
)

__all__ = [
    "BookResponse",
    "GameResponse",
    "IdentifierKind",
    "LookupClients",
    "LookupOutcome",
    "LookupProvider",
    "LookupResponse",
    "LookupService",
    "LookupStatus",
    "LookupStrategyFactory",
    "MediaLookupError",
    "MovieResponse",
    "MusicResponse",
    "RateLimitedError",
    "UnsupportedLookupError",
    "build_clients",
    "create_lookup_service",
    "create_strategy_factory",
]
