from __future__ import annotations

import pytest

from mediaset.services.lookup.clients.giantbomb import (
    GiantBombClient,
    parse_game_details,
    resolve_detail_path,
    select_rating,
)
from mediaset.services.lookup.provider_models import GameSearchResult
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup

SEARCH_PAYLOAD = {
    "status_code": 1,
    "error": "OK",
    "results": [
        {
            "id": 2600,
            "guid": "3030-2600",
            "name": "Halo: Combat Evolved",
            "deck": "Master Chief's first outing.",
            "original_release_date": "2001-11-15",
            "api_detail_url": "https://www.giantbomb.com/api/game/3030-2600/",
        },
        {"id": 1, "name": ""},
    ],
}

DETAILS_PAYLOAD = {
    "status_code": 1,
    "results": {
        "name": "Halo: Combat Evolved",
        "deck": "Master Chief's first outing.",
        "original_release_date": "2001-11-15",
        "genres": [{"name": "First-Person Shooter"}],
        "developers": [{"name": "Bungie"}],
        "publishers": [{"name": "Microsoft Game Studios"}],
        "platforms": [{"name": "Xbox", "abbreviation": "XBOX"}, {"name": "PC", "abbreviation": "PC"}],
        "original_game_rating": [{"name": "PEGI: 16+"}, {"name": "ESRB: M"}],
        "image": {"super_url": "https://gb.test/halo.jpg", "small_url": "https://gb.test/small.jpg"},
    },
}


def _client(handler, api_key="gb-key") -> tuple[GiantBombClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = GiantBombClient(base_url="https://gb.test/api/", http_client=transport.client(), api_key=api_key)
    return client, transport


async def test_search_sends_expected_params() -> None:
    client, transport = _client(lambda request: json_response(SEARCH_PAYLOAD))
    results = await client.search_games(" Halo ")

    params = transport.requests[0].url.params
    assert transport.requests[0].url.path == "/api/search/"
    assert params["api_key"] == "gb-key"
    assert params["format"] == "json"
    assert params["resources"] == "game"
    assert params["query"] == "Halo"
    assert len(results) == 1
    assert results[0].id == "2600"
    assert results[0].detail_ref == "https://www.giantbomb.com/api/game/3030-2600/"


async def test_api_error_status_yields_no_results() -> None:
    client, _ = _client(
        lambda request: json_response({"status_code": 100, "error": "Invalid API Key", "results": []})
    )
    assert await client.search_games("Halo") == []


async def test_missing_api_key_skips_requests() -> None:
    client, transport = _client(lambda request: json_response(SEARCH_PAYLOAD), api_key=None)
    assert not client.is_available
    assert await client.search_games("Halo") == []
    assert transport.requests == []


async def test_details_follow_the_api_detail_url_under_the_configured_base() -> None:
    client, transport = _client(lambda request: json_response(DETAILS_PAYLOAD))
    candidate = GameSearchResult(
        id="2600",
        name="Halo: Combat Evolved",
        detail_ref="https://www.giantbomb.com/api/game/3030-2600/",
    )
    details = await client.get_game_details(candidate)

    assert transport.requests[0].url.path == "/api/game/3030-2600/"
    assert details is not None
    assert details.developers == ["Bungie"]
    assert [platform.name for platform in details.platforms] == ["Xbox", "PC"]
    assert details.rating == "ESRB: M"
    assert details.image_url == "https://gb.test/halo.jpg"


async def test_details_without_reference_skip_request() -> None:
    client, transport = _client(lambda request: json_response(DETAILS_PAYLOAD))
    assert await client.get_game_details(GameSearchResult(id="1", name="Halo")) is None
    assert transport.requests == []


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("https://www.giantbomb.com/api/game/3030-1/", "game/3030-1/"),
        ("3030-1", "game/3030-1/"),
        ("/game/3030-1", "game/3030-1/"),
    ],
)
def test_resolve_detail_path(ref: str, expected: str) -> None:
    assert resolve_detail_path(ref) == expected


def test_select_rating_prefers_esrb() -> None:
    assert select_rating(["PEGI: 16+", "ESRB: M"]) == "ESRB: M"
    assert select_rating(["PEGI: 16+"]) == "PEGI: 16+"
    assert select_rating([]) == ""


def test_parse_details_falls_back_to_smaller_images() -> None:
    details = parse_game_details({"name": "Tetris", "image": {"medium_url": "https://gb.test/m.jpg"}})
    assert details.image_url == "https://gb.test/m.jpg"
    assert details.rating == ""
