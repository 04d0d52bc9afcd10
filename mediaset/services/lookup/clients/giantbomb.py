"""GiantBomb API client for video game metadata."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional
from urllib.parse import urlsplit

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_GIANTBOMB_URL

from ..extraction import get_int, get_list, get_mapping, get_names, get_optional_str, get_str
from ..provider_models import GameDetails, GamePlatform, GameSearchResult
from ..types import LookupProvider
from .base import BaseLookupClient

logger = log_mgr.get_logger().getChild("services.lookup.clients.giantbomb")

_GUID_PATTERN = re.compile(r"^\d+-\d+$")
_STATUS_OK = 1


def resolve_detail_path(detail_ref: str) -> str:
    """Turn a GiantBomb detail URL, ``game/...`` path or GUID into a request path."""
    ref = detail_ref.strip()
    if ref.startswith(("http://", "https://")):
        ref = urlsplit(ref).path.lstrip("/")
        if ref.startswith("api/"):
            ref = ref[len("api/"):]
    elif _GUID_PATTERN.match(ref):
        ref = f"game/{ref}"
    ref = ref.lstrip("/")
    if not ref.endswith("/"):
        ref += "/"
    return ref


def select_rating(ratings: List[str]) -> str:
    """Prefer an ESRB rating name, otherwise the first rating listed."""
    for rating in ratings:
        if "ESRB" in rating.upper():
            return rating
    return ratings[0] if ratings else ""


def _image_url(image: Mapping[str, Any]) -> Optional[str]:
    for key in ("super_url", "medium_url", "small_url"):
        value = get_optional_str(image, key)
        if value:
            return value
    return None


def parse_game_details(results: Mapping[str, Any]) -> GameDetails:
    platforms = [
        GamePlatform(name=get_str(entry, "name"), abbreviation=get_str(entry, "abbreviation"))
        for entry in get_list(results, "platforms")
        if isinstance(entry, Mapping) and get_optional_str(entry, "name")
    ]
    return GameDetails(
        name=get_str(results, "name"),
        genres=get_names(results, "genres"),
        developers=get_names(results, "developers"),
        publishers=get_names(results, "publishers"),
        platforms=platforms,
        release_date=get_str(results, "original_release_date"),
        description=get_str(results, "deck"),
        rating=select_rating(get_names(results, "original_game_rating")),
        image_url=_image_url(get_mapping(results, "image")),
    )


class GiantBombClient(BaseLookupClient):
    """Client for GiantBomb game search and details."""

    name = LookupProvider.GIANTBOMB
    requires_api_key = True

    def __init__(self, *, base_url: str = DEFAULT_GIANTBOMB_URL, **kwargs: Any) -> None:
        super().__init__(base_url=base_url, **kwargs)

    async def _get_results(self, path: str, **params: Any) -> Any:
        if not self._api_key:
            logger.warning(
                "GiantBomb API key is not configured; skipping request",
                extra={"event": "lookup.giantbomb.no_api_key", "provider": self.name.value},
            )
            return None
        payload = self._unwrap(
            await self._get_json(path, params={"api_key": self._api_key, "format": "json", **params})
        )
        if payload is None:
            return None
        status = get_int(payload, "status_code", default=None)
        if status != _STATUS_OK:
            logger.warning(
                "GiantBomb responded with status %s: %s",
                status,
                get_str(payload, "error"),
                extra={"event": "lookup.giantbomb.api_error", "provider": self.name.value},
            )
            return None
        return payload.get("results")

    async def search_games(self, title: str) -> List[GameSearchResult]:
        """Search games by title; returns an empty list when nothing matches."""
        query = title.strip()
        if not query:
            return []
        results = await self._get_results("search/", resources="game", query=query)
        candidates: List[GameSearchResult] = []
        for entry in results if isinstance(results, list) else []:
            if not isinstance(entry, Mapping):
                continue
            name = get_str(entry, "name")
            if not name:
                continue
            candidates.append(
                GameSearchResult(
                    id=get_str(entry, "id"),
                    name=name,
                    release_date=get_str(entry, "original_release_date"),
                    summary=get_str(entry, "deck"),
                    detail_ref=get_str(entry, "api_detail_url") or get_str(entry, "guid"),
                )
            )
        logger.info(
            "GiantBomb search for %r returned %s result(s)",
            query,
            len(candidates),
            extra={"event": "lookup.giantbomb.search", "provider": self.name.value},
        )
        return candidates

    async def get_game_details(self, candidate: GameSearchResult) -> Optional[GameDetails]:
        """Fetch full details for a search hit via its detail URL."""
        if not candidate.detail_ref:
            return None
        results = await self._get_results(resolve_detail_path(candidate.detail_ref))
        if not isinstance(results, Mapping):
            return None
        return parse_game_details(results)


__all__ = ["GiantBombClient", "parse_game_details", "resolve_detail_path", "select_rating"]
