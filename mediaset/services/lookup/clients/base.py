"""Base class for provider lookup clients."""

from __future__ import annotations

import json
import time
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

import httpx

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT

from ..errors import RateLimitedError
from ..rate_limiter import RateLimiter
from ..types import LookupProvider

logger = log_mgr.get_logger().getChild("services.lookup.clients")


class FetchStatus(str, Enum):
    """Outcome of a single provider HTTP exchange."""

    OK = "ok"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Tagged result of one provider request."""

    status: FetchStatus
    payload: Any = None
    status_code: Optional[int] = None
    retry_after: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, payload: Any, status_code: int = 200) -> "FetchResult":
        return cls(FetchStatus.OK, payload=payload, status_code=status_code)

    @classmethod
    def not_found(cls, status_code: Optional[int] = None) -> "FetchResult":
        return cls(FetchStatus.NOT_FOUND, status_code=status_code)

    @classmethod
    def rate_limited(cls, status_code: int, retry_after: Optional[float] = None) -> "FetchResult":
        return cls(FetchStatus.RATE_LIMITED, status_code=status_code, retry_after=retry_after)

    @classmethod
    def transient(cls, error: str, status_code: Optional[int] = None) -> "FetchResult":
        return cls(FetchStatus.TRANSIENT_ERROR, status_code=status_code, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is FetchStatus.OK


def parse_retry_after(headers: Mapping[str, str]) -> Optional[float]:
    """Return the ``Retry-After`` delay in seconds when given as a number."""
    value = headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value.strip()))
    except ValueError:
        return None


class BaseLookupClient(ABC):
    """Abstract base class for provider clients.

    Subclasses expose provider-specific coroutines and use :meth:`_get_json`
    (or :meth:`_request`) for I/O, then :meth:`_unwrap` to turn the tagged
    :class:`FetchResult` into a payload, ``None`` or a raised
    :class:`RateLimitedError`.
    """

    name: LookupProvider
    requires_api_key: bool = False
    rate_limit_statuses: FrozenSet[int] = frozenset({429})

    def __init__(
        self,
        *,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Provider API root; relative request paths are joined to it.
            http_client: Optional shared ``httpx.AsyncClient``. Clients created
                here are closed by :meth:`aclose`.
            api_key: API key for providers that require authentication.
            timeout_seconds: Per-request timeout.
            user_agent: Value sent in the ``User-Agent`` header.
            rate_limiter: Gate every request passes through, if any.
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(follow_redirects=True)
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._rate_limiter = rate_limiter
        self._logger = logger.getChild(self.name.value)

    @property
    def is_available(self) -> bool:
        """Return True unless the provider needs an API key that is missing."""
        if self.requires_api_key and not self._api_key:
            return False
        return True

    @property
    def rate_limiter(self) -> Optional[RateLimiter]:
        return self._rate_limiter

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "BaseLookupClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return self._base_url + path.lstrip("/")

    def _retry_after(self, response: httpx.Response) -> Optional[float]:
        return parse_retry_after(response.headers)

    def _on_response(self, response: httpx.Response) -> None:
        """Hook for subclasses that inspect response headers."""

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._rate_limiter is None:
            return await self._http.request(method, url, timeout=self._timeout, **kwargs)
        async with self._rate_limiter:
            return await self._http.request(method, url, timeout=self._timeout, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
        data: Optional[Mapping[str, str]] = None,
    ) -> FetchResult:
        """Perform one HTTP exchange and classify the outcome."""
        url = self._url(path)
        request_headers: Dict[str, str] = dict(self._headers)
        if headers:
            request_headers.update(headers)
        started = time.perf_counter()
        try:
            response = await self._send(
                method, url, params=params, headers=request_headers, content=content, data=data
            )
        except httpx.TimeoutException as exc:
            self._logger.warning(
                "%s request timed out: %s",
                self.name.value,
                path,
                extra={"event": "lookup.client.timeout", "provider": self.name.value},
            )
            return FetchResult.transient(f"timeout: {exc}")
        except httpx.HTTPError as exc:
            self._logger.warning(
                "%s request failed: %s (%s)",
                self.name.value,
                path,
                exc,
                extra={"event": "lookup.client.http_error", "provider": self.name.value},
            )
            return FetchResult.transient(str(exc))

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        self._on_response(response)
        status_code = response.status_code

        if status_code in self.rate_limit_statuses:
            retry_after = self._retry_after(response)
            self._logger.warning(
                "%s rate limit hit (HTTP %s) for %s",
                self.name.value,
                status_code,
                path,
                extra={
                    "event": "lookup.client.rate_limited",
                    "provider": self.name.value,
                    "status": status_code,
                    "retry_after": retry_after,
                },
            )
            return FetchResult.rate_limited(status_code, retry_after)

        if status_code == 404:
            self._logger.info(
                "%s returned 404 for %s",
                self.name.value,
                path,
                extra={"event": "lookup.client.not_found", "provider": self.name.value},
            )
            return FetchResult.not_found(status_code)

        if not response.is_success:
            self._logger.warning(
                "%s returned HTTP %s for %s",
                self.name.value,
                status_code,
                path,
                extra={
                    "event": "lookup.client.bad_status",
                    "provider": self.name.value,
                    "status": status_code,
                },
            )
            return FetchResult.transient(f"HTTP {status_code}", status_code)

        if not response.content or not response.content.strip():
            return FetchResult.not_found(status_code)

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._logger.warning(
                "%s returned malformed JSON for %s",
                self.name.value,
                path,
                extra={"event": "lookup.client.malformed", "provider": self.name.value},
            )
            return FetchResult.transient(f"malformed JSON: {exc}", status_code)

        self._logger.debug(
            "%s %s %s completed",
            self.name.value,
            method,
            path,
            extra={
                "event": "lookup.client.response",
                "provider": self.name.value,
                "status": status_code,
                "duration_ms": duration_ms,
            },
        )
        return FetchResult.ok(payload, status_code)

    async def _get_json(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> FetchResult:
        return await self._request("GET", path, params=params, headers=headers)

    def _unwrap(self, result: FetchResult) -> Any:
        """Return the payload of a successful fetch.

        Not-found and transient outcomes yield ``None``; a rate-limited outcome
        raises :class:`RateLimitedError` so callers can back off.
        """
        if result.status is FetchStatus.OK:
            return result.payload
        if result.status is FetchStatus.RATE_LIMITED:
            raise RateLimitedError(
                self.name.value, result.status_code, retry_after=result.retry_after
            )
        return None


__all__ = ["BaseLookupClient", "FetchResult", "FetchStatus", "parse_retry_after"]
