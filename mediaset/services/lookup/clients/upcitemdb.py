"""UPCitemdb client resolving retail barcodes to product records."""

from __future__ import annotations

import time
from typing import Any, Mapping, Optional

import httpx

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_UPCITEMDB_URL

from ..extraction import get_int, get_list, get_optional_str, get_str
from ..provider_models import UpcItem, UpcItemResponse
from ..types import LookupProvider
from .base import BaseLookupClient, parse_retry_after

logger = log_mgr.get_logger().getChild("services.lookup.clients.upcitemdb")


def _parse_item(entry: Mapping[str, Any]) -> UpcItem:
    return UpcItem(
        ean=get_str(entry, "ean"),
        title=get_str(entry, "title"),
        description=get_str(entry, "description"),
        category=get_str(entry, "category"),
        brand=get_str(entry, "brand"),
        model=get_str(entry, "model"),
        isbn=get_optional_str(entry, "isbn"),
    )


def parse_item_response(payload: Any) -> UpcItemResponse:
    items = [_parse_item(entry) for entry in get_list(payload, "items") if isinstance(entry, Mapping)]
    return UpcItemResponse(
        code=get_str(payload, "code"),
        total=get_int(payload, "total", default=len(items)) or 0,
        items=items,
    )


class UpcItemDbClient(BaseLookupClient):
    """Client for the UPCitemdb trial lookup endpoint.

    The trial tier allows very few requests, so instances are normally built
    with a :class:`~mediaset.services.lookup.rate_limiter.RateLimiter`
    carrying the per-minute and per-day budgets.
    """

    name = LookupProvider.UPCITEMDB
    requires_api_key = False
    rate_limit_statuses = frozenset({429})

    def __init__(self, *, base_url: str = DEFAULT_UPCITEMDB_URL, **kwargs: Any) -> None:
        super().__init__(base_url=base_url, **kwargs)

    def _on_response(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None or reset is not None:
            logger.debug(
                "UPCitemdb quota: remaining=%s reset=%s",
                remaining,
                reset,
                extra={
                    "event": "lookup.upcitemdb.quota",
                    "provider": self.name.value,
                    "remaining": remaining,
                    "reset": reset,
                },
            )

    def _retry_after(self, response: httpx.Response) -> Optional[float]:
        reset = response.headers.get("X-RateLimit-Reset")
        if reset:
            try:
                return max(0.0, float(reset) - time.time())
            except ValueError:
                pass
        return parse_retry_after(response.headers)

    async def get_item_by_code(self, code: str) -> Optional[UpcItemResponse]:
        """Look up a UPC or EAN barcode.

        Returns None for unknown codes and transient failures; raises
        :class:`~mediaset.services.lookup.errors.RateLimitedError` on HTTP 429
        or when the local request budget is exhausted.
        """
        value = code.strip()
        if not value:
            return None
        logger.info(
            "Looking up barcode %s on UPCitemdb",
            value,
            extra={"event": "lookup.upcitemdb.lookup", "provider": self.name.value},
        )
        payload = self._unwrap(await self._get_json("prod/trial/lookup", params={"upc": value}))
        if payload is None:
            return None
        response = parse_item_response(payload)
        logger.info(
            "UPCitemdb returned %s item(s) for %s",
            len(response.items),
            value,
            extra={"event": "lookup.upcitemdb.result", "provider": self.name.value},
        )
        return response


__all__ = ["UpcItemDbClient", "parse_item_response"]
