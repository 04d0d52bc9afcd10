"""Movie lookups: barcode -> UPCitemdb title -> TMDB."""

from __future__ import annotations

from typing import List, Optional

from mediaset import logging_manager as log_mgr

from ..clients.tmdb import POSTER_URL_TEMPLATE, TmdbClient
from ..clients.upcitemdb import UpcItemDbClient
from ..provider_models import MovieDetails, MovieSearchResult
from ..title_cleaning import clean_movie_title, extract_movie_format
from ..types import IdentifierKind, MediaType, MovieResponse
from .base import LookupStrategy

logger = log_mgr.get_logger().getChild("services.lookup.strategies.movie")


def select_movie(results: List[MovieSearchResult], title: str) -> Optional[MovieSearchResult]:
    """Prefer an exact case-insensitive title match, otherwise the first hit."""
    if not results:
        return None
    wanted = title.casefold()
    for result in results:
        if result.title.casefold() == wanted:
            return result
    return results[0]


def map_movie_response(details: MovieDetails, media_format: str = "") -> MovieResponse:
    rating = f"{details.vote_average:.1f}/10" if details.vote_average > 0 else ""
    image_url = (
        POSTER_URL_TEMPLATE.format(poster_path=details.poster_path) if details.poster_path else None
    )
    return MovieResponse(
        title=details.title,
        genres=list(details.genres),
        studios=list(details.production_companies),
        release_date=details.release_date,
        rating=rating,
        runtime=details.runtime,
        plot=details.overview,
        format=media_format,
        image_url=image_url,
    )


class MovieLookupStrategy(LookupStrategy[MovieResponse]):
    media_type = MediaType.MOVIES
    supported_identifiers = frozenset({IdentifierKind.UPC, IdentifierKind.EAN})

    def __init__(self, upcitemdb: UpcItemDbClient, tmdb: TmdbClient) -> None:
        self._upcitemdb = upcitemdb
        self._tmdb = tmdb

    async def lookup(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[MovieResponse]:
        response = await self._upcitemdb.get_item_by_code(identifier_value)
        if response is None or not response.items:
            self._log_miss("barcode not in UPCitemdb", identifier_value)
            return None

        item = response.items[0]
        if not item.title.strip():
            self._log_miss("barcode record has no title", identifier_value)
            return None

        cleaned = clean_movie_title(item.title, item.brand)
        media_format = extract_movie_format(item.title)
        logger.info(
            "Barcode %s titled %r, searching TMDB for %r (format %r)",
            identifier_value,
            item.title,
            cleaned,
            media_format,
            extra={"event": "lookup.movie.cleaned_title", "media_type": self.media_type.value},
        )

        results = await self._tmdb.search_movie(cleaned)
        best = select_movie(results, cleaned)
        if best is None:
            self._log_miss("no TMDB results", identifier_value, title=cleaned)
            return None

        details = await self._tmdb.get_movie_details(best.id)
        if details is None:
            self._log_miss("TMDB details unavailable", identifier_value, tmdb_id=best.id)
            return None
        return map_movie_response(details, media_format)


__all__ = ["MovieLookupStrategy", "map_movie_response", "select_movie"]
