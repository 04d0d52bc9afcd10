"""IGDB client, an alternative game catalog authenticated through Twitch."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

import httpx

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_IGDB_TOKEN_URL, DEFAULT_IGDB_URL

from ..extraction import coerce_int, get_list, get_mapping, get_optional_str, get_str
from ..normalization import decode_age_rating
from ..provider_models import GameDetails, GamePlatform, GameSearchResult
from ..types import LookupProvider
from .base import BaseLookupClient

logger = log_mgr.get_logger().getChild("services.lookup.clients.igdb")

GAME_FIELDS = (
    "name,summary,first_release_date,genres.name,involved_companies.company.name,"
    "involved_companies.developer,involved_companies.publisher,platforms.name,"
    "platforms.abbreviation,age_ratings.category,age_ratings.rating,cover.url"
)
_SEARCH_LIMIT = 10
_TOKEN_EXPIRY_MARGIN_SECONDS = 60
_MIN_TOKEN_LIFETIME_SECONDS = 60


class IgdbTokenError(RuntimeError):
    """Raised when a Twitch access token cannot be obtained."""


class IgdbTokenService:
    """Fetch and cache Twitch client-credentials tokens for IGDB."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        token_url: str = DEFAULT_IGDB_TOKEN_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient()
        self._timeout = timeout_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def _cached(self) -> Optional[str]:
        if self._token and self._clock() < self._expires_at:
            return self._token
        return None

    async def get_access_token(self) -> str:
        cached = self._cached()
        if cached:
            return cached
        async with self._lock:
            cached = self._cached()
            if cached:
                return cached
            logger.info("Fetching new IGDB access token", extra={"event": "lookup.igdb.token_fetch"})
            try:
                response = await self._http.post(
                    self._token_url,
                    data={
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "grant_type": "client_credentials",
                    },
                    timeout=self._timeout,
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise IgdbTokenError(f"Failed to obtain IGDB access token: {exc}") from exc

            token = get_optional_str(payload, "access_token")
            if not token:
                raise IgdbTokenError("IGDB token response did not contain an access token")
            expires_in = coerce_int(payload.get("expires_in") if isinstance(payload, Mapping) else None) or 0
            lifetime = max(expires_in - _TOKEN_EXPIRY_MARGIN_SECONDS, _MIN_TOKEN_LIFETIME_SECONDS)
            self._token = token
            self._expires_at = self._clock() + lifetime
            logger.info(
                "IGDB access token obtained, expires in %ss",
                expires_in,
                extra={"event": "lookup.igdb.token_ready"},
            )
            return token

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()


def fix_cover_url(url: Optional[str]) -> Optional[str]:
    """Make protocol-relative cover URLs absolute and request the large size."""
    if not url:
        return url
    if url.startswith("//"):
        url = "https:" + url
    return url.replace("t_thumb", "t_cover_big")


def format_release_date(timestamp: Any) -> str:
    seconds = coerce_int(timestamp)
    if seconds is None:
        return ""
    try:
        released = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return released.strftime("%Y-%m-%d")


def _company_names(game: Mapping[str, Any], role: str) -> List[str]:
    names: List[str] = []
    for entry in get_list(game, "involved_companies"):
        if not isinstance(entry, Mapping) or entry.get(role) is not True:
            continue
        name = get_optional_str(get_mapping(entry, "company"), "name")
        if name:
            names.append(name)
    return names


def parse_game(game: Mapping[str, Any]) -> GameDetails:
    ratings = []
    for entry in get_list(game, "age_ratings"):
        category = coerce_int(entry.get("category")) if isinstance(entry, Mapping) else None
        rating = coerce_int(entry.get("rating")) if isinstance(entry, Mapping) else None
        if category is not None and rating is not None:
            ratings.append((category, rating))
    platforms = [
        GamePlatform(name=get_str(entry, "name"), abbreviation=get_str(entry, "abbreviation"))
        for entry in get_list(game, "platforms")
        if isinstance(entry, Mapping) and get_optional_str(entry, "name")
    ]
    return GameDetails(
        name=get_str(game, "name"),
        genres=[
            name
            for name in (get_optional_str(entry, "name") for entry in get_list(game, "genres"))
            if name
        ],
        developers=_company_names(game, "developer"),
        publishers=_company_names(game, "publisher"),
        platforms=platforms,
        release_date=format_release_date(game.get("first_release_date")),
        description=get_str(game, "summary"),
        rating=decode_age_rating(ratings),
        image_url=fix_cover_url(get_optional_str(get_mapping(game, "cover"), "url")),
    )


class IgdbClient(BaseLookupClient):
    """Client for IGDB's Apicalypse ``games`` endpoint."""

    name = LookupProvider.IGDB
    requires_api_key = True

    def __init__(
        self,
        *,
        token_service: IgdbTokenService,
        client_id: str,
        base_url: str = DEFAULT_IGDB_URL,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url=base_url, api_key=client_id, **kwargs)
        self._token_service = token_service
        self._client_id = client_id

    async def _query_games(self, body: str) -> List[Mapping[str, Any]]:
        try:
            token = await self._token_service.get_access_token()
        except IgdbTokenError as exc:
            logger.warning(
                "Skipping IGDB request: %s",
                exc,
                extra={"event": "lookup.igdb.token_error", "provider": self.name.value},
            )
            return []
        result = await self._request(
            "POST",
            "games",
            headers={
                "Client-ID": self._client_id,
                "Authorization": f"Bearer {token}",
                "Content-Type": "text/plain",
            },
            content=body,
        )
        payload = self._unwrap(result)
        if not isinstance(payload, list):
            return []
        return [entry for entry in payload if isinstance(entry, Mapping)]

    async def search_games(self, title: str) -> List[GameSearchResult]:
        """Search games by title; returns an empty list when nothing matches."""
        query = title.strip()
        if not query:
            return []
        escaped = query.replace('"', '\\"')
        games = await self._query_games(
            f'fields id,{GAME_FIELDS}; search "{escaped}"; limit {_SEARCH_LIMIT};'
        )
        candidates: List[GameSearchResult] = []
        for game in games:
            game_id = coerce_int(game.get("id"))
            name = get_str(game, "name")
            if game_id is None or not name:
                continue
            candidates.append(
                GameSearchResult(
                    id=str(game_id),
                    name=name,
                    release_date=format_release_date(game.get("first_release_date")),
                    summary=get_str(game, "summary"),
                    detail_ref=str(game_id),
                )
            )
        logger.info(
            "IGDB search for %r returned %s result(s)",
            query,
            len(candidates),
            extra={"event": "lookup.igdb.search", "provider": self.name.value},
        )
        return candidates

    async def get_game_details(self, candidate: GameSearchResult) -> Optional[GameDetails]:
        """Fetch the full record for a search hit by IGDB id."""
        game_id = coerce_int(candidate.detail_ref or candidate.id)
        if game_id is None:
            return None
        games = await self._query_games(f"fields {GAME_FIELDS}; where id = {game_id};")
        if not games:
            return None
        return parse_game(games[0])

    async def aclose(self) -> None:
        await super().aclose()
        await self._token_service.aclose()


__all__ = [
    "IgdbClient",
    "IgdbTokenError",
    "IgdbTokenService",
    "fix_cover_url",
    "format_release_date",
    "parse_game",
]
