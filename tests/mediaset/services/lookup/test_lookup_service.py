from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from mediaset.config_manager import LookupSettings
from mediaset.services.lookup.errors import RateLimitedError, UnsupportedLookupError
from mediaset.services.lookup.factory import LookupStrategyFactory
from mediaset.services.lookup.service import LookupStatus, LookupService, create_lookup_service
from mediaset.services.lookup.strategies import LookupStrategy
from mediaset.services.lookup.types import (
    IdentifierKind,
    MediaType,
    MovieResponse,
    MusicResponse,
)
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup


class KnownMovies(LookupStrategy[MovieResponse]):
    media_type = MediaType.MOVIES
    supported_identifiers = frozenset({IdentifierKind.UPC})

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error
        self.seen: List[str] = []

    async def lookup(self, identifier_kind, identifier_value) -> Optional[MovieResponse]:
        self.seen.append(identifier_value)
        if self.error is not None:
            raise self.error
        if identifier_value == "883929106943":
            return MovieResponse(title="The Matrix")
        return None


class SearchableMusic(LookupStrategy[MusicResponse]):
    media_type = MediaType.MUSICS
    supported_identifiers = frozenset({IdentifierKind.UPC})

    def __init__(self) -> None:
        self.searches: List[str] = []

    async def lookup(self, identifier_kind, identifier_value) -> Optional[MusicResponse]:
        return None

    async def search_by_title(self, title: str) -> List[MusicResponse]:
        self.searches.append(title)
        return [MusicResponse(title=title)]


def _service(*strategies: LookupStrategy) -> LookupService:
    return LookupService(LookupStrategyFactory(strategies or [KnownMovies(), SearchableMusic()]))


async def test_found_outcome_strips_identifier() -> None:
    strategy = KnownMovies()
    outcome = await _service(strategy).lookup(MediaType.MOVIES, IdentifierKind.UPC, " 883929106943 ")

    assert strategy.seen == ["883929106943"]
    assert outcome.status is LookupStatus.FOUND
    assert outcome.found
    assert outcome.response == MovieResponse(title="The Matrix")
    payload = outcome.to_dict()
    assert payload["status"] == "found"
    assert payload["media_type"] == "Movies"
    assert payload["response"]["title"] == "The Matrix"


async def test_not_found_outcome() -> None:
    outcome = await _service().lookup(MediaType.MOVIES, IdentifierKind.UPC, "000")
    assert outcome.status is LookupStatus.NOT_FOUND
    assert outcome.response is None
    assert not outcome.found


async def test_rate_limit_becomes_an_outcome() -> None:
    error = RateLimitedError("upcitemdb", 429, retry_after=30.0)
    outcome = await _service(KnownMovies(error)).lookup(MediaType.MOVIES, IdentifierKind.UPC, "1")

    assert outcome.status is LookupStatus.RATE_LIMITED
    assert outcome.provider == "upcitemdb"
    assert outcome.status_code == 429
    assert outcome.retry_after == 30.0
    assert outcome.response is None


async def test_unsupported_pair_raises() -> None:
    with pytest.raises(UnsupportedLookupError):
        await _service().lookup(MediaType.BOOKS, IdentifierKind.ISBN, "9780441013593")


async def test_cancellation_propagates() -> None:
    service = _service(KnownMovies(asyncio.CancelledError()))
    with pytest.raises(asyncio.CancelledError):
        await service.lookup(MediaType.MOVIES, IdentifierKind.UPC, "1")


async def test_search_only_where_supported() -> None:
    music = SearchableMusic()
    service = _service(KnownMovies(), music)

    assert await service.search(MediaType.MOVIES, "Heat") == []
    assert await service.search(MediaType.MUSICS, "   ") == []
    results = await service.search(MediaType.MUSICS, " Kid A ")
    assert [result.title for result in results] == ["Kid A"]
    assert music.searches == ["Kid A"]
    assert service.searchable_media_types() == ["Musics"]


def test_capabilities() -> None:
    assert _service().capabilities() == {"Movies": ["upc"], "Musics": ["upc"]}


def test_integrations_without_clients() -> None:
    assert _service().integrations() == []


async def test_create_lookup_service_reports_integrations() -> None:
    http = RecordingTransport(lambda request: json_response({})).client()
    settings = LookupSettings.model_validate({"tmdb": {"api_key": "tmdb-key"}})
    service = create_lookup_service(settings, http_client=http)

    entries = {entry["provider"]: entry for entry in service.integrations()}
    assert list(entries) == ["openlibrary", "upcitemdb", "tmdb", "giantbomb", "musicbrainz"]
    assert entries["tmdb"]["enabled"] is True
    assert entries["tmdb"]["requires_api_key"] is True
    assert entries["giantbomb"]["enabled"] is False
    assert entries["openlibrary"]["throttled"] is False
    assert entries["openlibrary"]["min_interval_seconds"] is None
    assert entries["upcitemdb"]["throttled"] is True
    assert entries["upcitemdb"]["min_interval_seconds"] == 1.0
    assert "tmdb-key" not in repr(service.integrations())

    await service.aclose()
    assert not http.is_closed
    await http.aclose()
