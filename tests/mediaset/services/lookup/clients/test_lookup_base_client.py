from __future__ import annotations

import httpx
import pytest

from mediaset.services.lookup.clients.base import (
    BaseLookupClient,
    FetchStatus,
    parse_retry_after,
)
from mediaset.services.lookup.errors import RateLimitedError
from mediaset.services.lookup.types import LookupProvider
from tests.helpers.lookup_http import RecordingTransport, json_response

pytestmark = pytest.mark.lookup


class _ProbeClient(BaseLookupClient):
    name = LookupProvider.OPENLIBRARY


def _client(handler) -> tuple[_ProbeClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = _ProbeClient(base_url="https://provider.test/api", http_client=transport.client())
    return client, transport


async def test_success_returns_payload_and_sends_headers() -> None:
    client, transport = _client(lambda request: json_response({"ok": True}))
    result = await client._get_json("items/1", params={"q": "x"})
    assert result.status is FetchStatus.OK
    assert result.payload == {"ok": True}
    request = transport.requests[0]
    assert str(request.url) == "https://provider.test/api/items/1?q=x"
    assert request.headers["User-Agent"].startswith("MediaSet/")
    assert request.headers["Accept"] == "application/json"


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (httpx.Response(404), FetchStatus.NOT_FOUND),
        (httpx.Response(200, content=b""), FetchStatus.NOT_FOUND),
        (httpx.Response(200, content=b"   "), FetchStatus.NOT_FOUND),
        (httpx.Response(500), FetchStatus.TRANSIENT_ERROR),
        (httpx.Response(503), FetchStatus.TRANSIENT_ERROR),
        (httpx.Response(200, content=b"<html>"), FetchStatus.TRANSIENT_ERROR),
        (httpx.Response(429, headers={"Retry-After": "12"}), FetchStatus.RATE_LIMITED),
    ],
)
async def test_responses_are_classified(response: httpx.Response, expected: FetchStatus) -> None:
    client, _ = _client(lambda request: response)
    result = await client._get_json("anything")
    assert result.status is expected


async def test_network_failures_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(handler)
    result = await client._get_json("anything")
    assert result.status is FetchStatus.TRANSIENT_ERROR
    assert client._unwrap(result) is None


async def test_timeouts_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client, _ = _client(handler)
    result = await client._get_json("anything")
    assert result.status is FetchStatus.TRANSIENT_ERROR


async def test_unwrap_raises_on_rate_limit() -> None:
    client, _ = _client(lambda request: httpx.Response(429, headers={"Retry-After": "12"}))
    result = await client._get_json("anything")
    with pytest.raises(RateLimitedError) as excinfo:
        client._unwrap(result)
    assert excinfo.value.provider == "openlibrary"
    assert excinfo.value.status_code == 429
    assert excinfo.value.retry_after == 12.0


async def test_absolute_urls_bypass_base_url() -> None:
    client, transport = _client(lambda request: json_response([]))
    await client._get_json("https://other.test/x")
    assert transport.requests[0].url.host == "other.test"


async def test_owned_client_is_closed() -> None:
    client = _ProbeClient(base_url="https://provider.test/")
    async with client:
        pass
    assert client._http.is_closed


def test_parse_retry_after() -> None:
    assert parse_retry_after({"Retry-After": "5"}) == 5.0
    assert parse_retry_after({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}) is None
    assert parse_retry_after({}) is None


def test_availability_depends_on_api_key() -> None:
    class _KeyedClient(BaseLookupClient):
        name = LookupProvider.TMDB
        requires_api_key = True

    assert not _KeyedClient(base_url="https://x.test/").is_available
    assert _KeyedClient(base_url="https://x.test/", api_key="k").is_available
