from __future__ import annotations

import httpx
import pytest

from mediaset.services.lookup.clients.tmdb import TmdbClient
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup

DETAILS_PAYLOAD = {
    "id": 603,
    "title": "The Matrix",
    "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
    "production_companies": [{"name": "Village Roadshow Pictures"}, {"name": "Groucho II Film Partnership"}],
    "release_date": "1999-03-30",
    "vote_average": 8.2,
    "runtime": 136,
    "overview": "Set in the 22nd century...",
    "poster_path": "/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg",
}


def _client(handler, api_key="secret") -> tuple[TmdbClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = TmdbClient(base_url="https://tmdb.test/3/", http_client=transport.client(), api_key=api_key)
    return client, transport


async def test_search_sends_api_key_param() -> None:
    payload = {"results": [{"id": 603, "title": "The Matrix", "release_date": "1999-03-30"}, {"title": "no id"}]}
    client, transport = _client(lambda request: json_response(payload))
    results = await client.search_movie("The Matrix")

    request = transport.requests[0]
    assert request.url.path == "/3/search/movie"
    assert request.url.params["query"] == "The Matrix"
    assert request.url.params["api_key"] == "secret"
    assert "Authorization" not in request.headers
    assert [(result.id, result.title) for result in results] == [(603, "The Matrix")]


async def test_read_access_token_uses_bearer_header() -> None:
    client, transport = _client(lambda request: json_response({"results": []}), api_key="eyJhbGciOi")
    assert await client.search_movie("Heat") == []
    request = transport.requests[0]
    assert request.headers["Authorization"] == "Bearer eyJhbGciOi"
    assert "api_key" not in request.url.params


async def test_missing_api_key_skips_requests() -> None:
    client, transport = _client(lambda request: json_response({}), api_key=None)
    assert not client.is_available
    assert await client.search_movie("Heat") == []
    assert await client.get_movie_details(949) is None
    assert transport.requests == []


async def test_movie_details() -> None:
    client, transport = _client(lambda request: json_response(DETAILS_PAYLOAD))
    details = await client.get_movie_details(603)

    assert transport.requests[0].url.path == "/3/movie/603"
    assert details is not None
    assert details.genres == ["Action", "Science Fiction"]
    assert details.production_companies == ["Village Roadshow Pictures", "Groucho II Film Partnership"]
    assert details.vote_average == 8.2
    assert details.runtime == 136
    assert details.poster_path == "/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg"


async def test_movie_details_not_found() -> None:
    client, _ = _client(lambda request: httpx.Response(404))
    assert await client.get_movie_details(1) is None
