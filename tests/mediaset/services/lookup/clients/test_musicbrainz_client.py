from __future__ import annotations

import asyncio

import httpx
import pytest

from mediaset.services.lookup.clients.musicbrainz import MusicBrainzClient, parse_release
from mediaset.services.lookup.errors import RateLimitedError
from mediaset.services.lookup.rate_limiter import RateLimiter
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup

RELEASE = {
    "id": "b84ee12a-09ef-421b-82de-0441a926375b",
    "title": "OK Computer",
    "date": "1997-06-16",
    "country": "GB",
    "barcode": "724385522925",
    "status": "Official",
    "artist-credit": [{"name": "Radiohead", "artist": {"id": "a74b1b7f", "name": "Radiohead"}}],
    "label-info": [{"catalog-number": "NODATA 02", "label": {"id": "l1", "name": "Parlophone"}}],
    "media": [
        {
            "format": "CD",
            "track-count": 2,
            "tracks": [
                {"id": "t1", "number": "1", "title": "Airbag", "length": 284000},
                {"id": "t2", "number": "2", "title": "Paranoid Android", "recording": {"length": 383000}},
            ],
        }
    ],
    "tags": [{"name": "alternative rock", "count": 5}],
}


def _client(handler, limiter: RateLimiter) -> tuple[MusicBrainzClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = MusicBrainzClient(
        base_url="https://mb.test/", http_client=transport.client(), rate_limiter=limiter
    )
    return client, transport


@pytest.fixture()
def limiter(fake_clock) -> RateLimiter:
    return RateLimiter(1.0, name="musicbrainz", clock=fake_clock, sleep=fake_clock.sleep)


async def test_barcode_search(limiter) -> None:
    client, transport = _client(lambda request: json_response({"releases": [RELEASE]}), limiter)
    release = await client.get_release_by_barcode("724385522925")

    request = transport.requests[0]
    assert request.url.path == "/ws/2/release/"
    assert request.url.params["query"] == "barcode:724385522925"
    assert request.url.params["fmt"] == "json"
    assert release is not None
    assert release.id == "b84ee12a-09ef-421b-82de-0441a926375b"


async def test_barcode_without_releases(limiter) -> None:
    client, _ = _client(lambda request: json_response({"releases": []}), limiter)
    assert await client.get_release_by_barcode("000000000000") is None


async def test_release_details_request_includes(limiter) -> None:
    client, transport = _client(lambda request: json_response(RELEASE), limiter)
    release = await client.get_release_by_id(RELEASE["id"])

    url = str(transport.requests[0].url)
    assert f"/ws/2/release/{RELEASE['id']}" in url
    assert "inc=artist-credits+labels+recordings+tags" in url
    assert "fmt=json" in url
    assert release is not None
    assert release.labels[0].name == "Parlophone"
    assert release.media[0].tracks[1].effective_length == 383000


async def test_title_search(limiter) -> None:
    client, transport = _client(lambda request: json_response({"releases": [RELEASE, {"title": "no id"}]}), limiter)
    releases = await client.search_releases_by_title("OK Computer")

    assert transport.requests[0].url.params["query"] == "release:OK Computer"
    assert [release.title for release in releases] == ["OK Computer"]


async def test_service_unavailable_is_a_rate_limit(limiter) -> None:
    client, _ = _client(lambda request: httpx.Response(503, headers={"Retry-After": "2"}), limiter)
    with pytest.raises(RateLimitedError) as excinfo:
        await client.get_release_by_barcode("724385522925")
    assert excinfo.value.provider == "musicbrainz"
    assert excinfo.value.status_code == 503
    assert excinfo.value.retry_after == 2.0


async def test_consecutive_requests_are_spaced(limiter, fake_clock) -> None:
    client, transport = _client(lambda request: json_response({"releases": [RELEASE]}), limiter)
    await client.get_release_by_barcode("724385522925")
    await client.get_release_by_barcode("724385522925")

    assert len(transport.requests) == 2
    assert fake_clock.sleeps == [pytest.approx(1.0)]


async def test_cancelled_wait_sends_nothing(fake_clock) -> None:
    waiting = asyncio.Event()

    async def blocking_sleep(seconds: float) -> None:
        waiting.set()
        await asyncio.Event().wait()

    limiter = RateLimiter(1.0, name="musicbrainz", clock=fake_clock, sleep=blocking_sleep)
    client, transport = _client(lambda request: json_response({"releases": [RELEASE]}), limiter)
    await client.get_release_by_barcode("724385522925")

    task = asyncio.create_task(client.get_release_by_barcode("724385522925"))
    await waiting.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(transport.requests) == 1


def test_parse_release_requires_an_id() -> None:
    assert parse_release({"title": "Untitled"}) is None
    release = parse_release(RELEASE)
    assert release is not None
    assert release.artist_credits[0].name == "Radiohead"
    assert release.tags[0].name == "alternative rock"
