"""TMDB API client for movie metadata."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_TMDB_URL

from ..extraction import coerce_int, get_float, get_list, get_names, get_optional_str, get_str
from ..provider_models import MovieDetails, MovieSearchResult
from ..types import LookupProvider
from .base import BaseLookupClient, FetchResult

logger = log_mgr.get_logger().getChild("services.lookup.clients.tmdb")

POSTER_URL_TEMPLATE = "https://image.tmdb.org/t/p/w500{poster_path}"


def _parse_search_result(entry: Mapping[str, Any]) -> Optional[MovieSearchResult]:
    movie_id = coerce_int(entry.get("id"))
    if movie_id is None:
        return None
    return MovieSearchResult(
        id=movie_id,
        title=get_str(entry, "title"),
        release_date=get_str(entry, "release_date"),
        overview=get_str(entry, "overview"),
    )


def parse_movie_details(payload: Mapping[str, Any]) -> Optional[MovieDetails]:
    movie_id = coerce_int(payload.get("id"))
    title = get_str(payload, "title")
    if movie_id is None and not title:
        return None
    return MovieDetails(
        id=movie_id or 0,
        title=title,
        genres=get_names(payload, "genres"),
        production_companies=get_names(payload, "production_companies"),
        release_date=get_str(payload, "release_date"),
        vote_average=get_float(payload, "vote_average"),
        runtime=coerce_int(payload.get("runtime")),
        overview=get_str(payload, "overview"),
        poster_path=get_optional_str(payload, "poster_path"),
    )


class TmdbClient(BaseLookupClient):
    """Client for TMDB movie search and details.

    API keys are sent as the ``api_key`` query parameter; v4 read access
    tokens (JWTs) are sent as a bearer token instead.
    """

    name = LookupProvider.TMDB
    requires_api_key = True

    def __init__(self, *, base_url: str = DEFAULT_TMDB_URL, **kwargs: Any) -> None:
        super().__init__(base_url=base_url, **kwargs)

    async def _get_with_auth(
        self, endpoint: str, *, params: Optional[Dict[str, Any]] = None
    ) -> Optional[FetchResult]:
        if not self._api_key:
            logger.warning(
                "TMDB API key is not configured; skipping request",
                extra={"event": "lookup.tmdb.no_api_key", "provider": self.name.value},
            )
            return None

        query_params: Dict[str, Any] = dict(params or {})
        headers: Dict[str, str] = {}
        if self._api_key.startswith("eyJ"):
            headers["Authorization"] = f"Bearer {self._api_key}"
        else:
            query_params["api_key"] = self._api_key
        return await self._get_json(endpoint, params=query_params, headers=headers)

    async def search_movie(self, title: str) -> List[MovieSearchResult]:
        """Search movies by title; returns an empty list when nothing matches."""
        query = title.strip()
        if not query:
            return []
        result = await self._get_with_auth("search/movie", params={"query": query})
        payload = self._unwrap(result) if result is not None else None

        results: List[MovieSearchResult] = []
        for entry in get_list(payload, "results"):
            if not isinstance(entry, Mapping):
                continue
            parsed = _parse_search_result(entry)
            if parsed is not None:
                results.append(parsed)
        logger.info(
            "TMDB search for %r returned %s result(s)",
            query,
            len(results),
            extra={"event": "lookup.tmdb.search", "provider": self.name.value},
        )
        return results

    async def get_movie_details(self, movie_id: int) -> Optional[MovieDetails]:
        """Fetch full details for one movie id."""
        result = await self._get_with_auth(f"movie/{movie_id}")
        payload = self._unwrap(result) if result is not None else None
        if not isinstance(payload, Mapping):
            return None
        return parse_movie_details(payload)


__all__ = ["POSTER_URL_TEMPLATE", "TmdbClient", "parse_movie_details"]
