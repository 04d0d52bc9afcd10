"""Game lookups: barcode -> UPCitemdb title -> game catalog."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from mediaset import logging_manager as log_mgr

from ..clients.upcitemdb import UpcItemDbClient
from ..matching import find_best_match
from ..normalization import derive_format_from_platforms
from ..provider_models import GameDetails, GameSearchResult
from ..title_cleaning import (
    clean_game_title_and_extract_edition,
    extract_game_format,
    extract_platform_from_barcode,
)
from ..types import GameResponse, IdentifierKind, MediaType
from .base import LookupStrategy

logger = log_mgr.get_logger().getChild("services.lookup.strategies.game")


class GameCatalog(Protocol):
    """What the game strategy needs from GiantBomb or IGDB."""

    async def search_games(self, title: str) -> Sequence[GameSearchResult]:
        ...

    async def get_game_details(self, candidate: GameSearchResult) -> Optional[GameDetails]:
        ...


def map_game_response(
    details: GameDetails,
    *,
    edition: str = "",
    media_format: str = "",
    platform_hint: str = "",
) -> GameResponse:
    """Build the response, deriving format and platform when the title lacked them."""
    if not media_format:
        media_format = derive_format_from_platforms(details.platforms, platform_hint)
    platform = platform_hint or (details.platforms[0].name if details.platforms else "")
    title = f"{details.name} ({edition})" if edition else details.name
    return GameResponse(
        title=title,
        platform=platform,
        genres=list(details.genres),
        developers=list(details.developers),
        publishers=list(details.publishers),
        release_date=details.release_date,
        rating=details.rating,
        description=details.description,
        format=media_format,
        image_url=details.image_url,
    )


class GameLookupStrategy(LookupStrategy[GameResponse]):
    media_type = MediaType.GAMES
    supported_identifiers = frozenset({IdentifierKind.UPC, IdentifierKind.EAN})

    def __init__(self, upcitemdb: UpcItemDbClient, catalog: GameCatalog) -> None:
        self._upcitemdb = upcitemdb
        self._catalog = catalog

    async def lookup(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[GameResponse]:
        response = await self._upcitemdb.get_item_by_code(identifier_value)
        if response is None or not response.items:
            self._log_miss("barcode not in UPCitemdb", identifier_value)
            return None

        item = response.items[0]
        search_title, edition = clean_game_title_and_extract_edition(item.title)
        if not search_title:
            self._log_miss("barcode record has no usable title", identifier_value)
            return None
        media_format = extract_game_format(item.title)
        platform_hint = extract_platform_from_barcode(
            item.title, item.category, item.brand, item.model
        )
        logger.info(
            "Barcode %s titled %r, searching games for %r (edition %r, platform %r)",
            identifier_value,
            item.title,
            search_title,
            edition,
            platform_hint,
            extra={"event": "lookup.game.cleaned_title", "media_type": self.media_type.value},
        )

        candidates = list(await self._catalog.search_games(search_title))
        best = find_best_match(candidates, search_title)
        if best is None:
            self._log_miss("no catalog results", identifier_value, title=search_title)
            return None

        details = await self._catalog.get_game_details(best)
        if details is None:
            self._log_miss("catalog details unavailable", identifier_value, game_id=best.id)
            return None
        return map_game_response(
            details, edition=edition, media_format=media_format, platform_hint=platform_hint
        )


__all__ = ["GameCatalog", "GameLookupStrategy", "map_game_response"]
