from __future__ import annotations

from typing import Optional

import pytest

from mediaset.config_manager import ConfigurationError, LookupSettings
from mediaset.services.lookup.clients.giantbomb import GiantBombClient
from mediaset.services.lookup.clients.igdb import IgdbClient
from mediaset.services.lookup.errors import UnsupportedLookupError
from mediaset.services.lookup.factory import (
    LookupStrategyFactory,
    build_clients,
    create_strategy_factory,
)
from mediaset.services.lookup.strategies import BookLookupStrategy, LookupStrategy
from mediaset.services.lookup.types import (
    BookResponse,
    IdentifierKind,
    LookupProvider,
    MediaType,
)
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup


class IsbnOnlyStrategy(LookupStrategy[BookResponse]):
    media_type = MediaType.BOOKS
    supported_identifiers = frozenset({IdentifierKind.ISBN})

    async def lookup(self, identifier_kind, identifier_value) -> Optional[BookResponse]:
        return BookResponse(title=identifier_value)


class OtherIsbnStrategy(IsbnOnlyStrategy):
    pass


def _http():
    return RecordingTransport(lambda request: json_response({})).client()


def test_get_strategy_and_unsupported_pair() -> None:
    strategy = IsbnOnlyStrategy()
    factory = LookupStrategyFactory([strategy])

    assert factory.get_strategy(MediaType.BOOKS, IdentifierKind.ISBN) is strategy
    with pytest.raises(UnsupportedLookupError) as excinfo:
        factory.get_strategy(MediaType.MOVIES, IdentifierKind.ISBN)
    assert str(excinfo.value) == "No strategy found for Movies with identifier type: isbn"


def test_duplicate_registration_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        LookupStrategyFactory([IsbnOnlyStrategy(), OtherIsbnStrategy()])


def test_title_search_lookup() -> None:
    factory = LookupStrategyFactory([IsbnOnlyStrategy()])
    assert factory.find_title_search(MediaType.BOOKS) is None


async def test_builtin_registrations() -> None:
    clients = build_clients(LookupSettings(), http_client=_http())
    factory = create_strategy_factory(clients)

    assert factory.supported_pairs() == [
        (MediaType.BOOKS, IdentifierKind.ISBN),
        (MediaType.BOOKS, IdentifierKind.LCCN),
        (MediaType.BOOKS, IdentifierKind.OCLC),
        (MediaType.BOOKS, IdentifierKind.OLID),
        (MediaType.BOOKS, IdentifierKind.UPC),
        (MediaType.BOOKS, IdentifierKind.EAN),
        (MediaType.MOVIES, IdentifierKind.UPC),
        (MediaType.MOVIES, IdentifierKind.EAN),
        (MediaType.GAMES, IdentifierKind.UPC),
        (MediaType.GAMES, IdentifierKind.EAN),
        (MediaType.MUSICS, IdentifierKind.UPC),
        (MediaType.MUSICS, IdentifierKind.EAN),
    ]
    assert isinstance(factory.get_strategy(MediaType.BOOKS, IdentifierKind.UPC), BookLookupStrategy)
    assert factory.find_title_search(MediaType.MOVIES) is None
    assert factory.find_title_search(MediaType.MUSICS) is not None


async def test_build_clients_wires_limits_and_credentials() -> None:
    settings = LookupSettings.model_validate(
        {
            "tmdb": {"api_key": "  "},
            "giantbomb": {"api_key": "gb-key"},
            "upcitemdb": {"min_delay_seconds": 2.5, "max_requests_per_day": 10},
        }
    )
    clients = build_clients(settings, http_client=_http())

    assert isinstance(clients.games, GiantBombClient)
    assert clients.games.is_available
    assert not clients.tmdb.is_available
    assert clients.openlibrary.rate_limiter is None
    assert clients.upcitemdb.rate_limiter.min_interval_seconds == 2.5
    assert clients.upcitemdb.rate_limiter.max_per_day == 10
    assert clients.musicbrainz.rate_limiter.min_interval_seconds == 1.0
    assert set(clients.by_provider()) == {
        LookupProvider.OPENLIBRARY,
        LookupProvider.UPCITEMDB,
        LookupProvider.TMDB,
        LookupProvider.GIANTBOMB,
        LookupProvider.MUSICBRAINZ,
    }


async def test_igdb_can_replace_giantbomb() -> None:
    settings = LookupSettings.model_validate(
        {"game_provider": "IGDB", "igdb": {"client_id": "cid", "client_secret": "secret"}}
    )
    clients = build_clients(settings, http_client=_http())

    assert isinstance(clients.games, IgdbClient)
    assert clients.games.is_available
    assert LookupProvider.IGDB in clients.by_provider()
