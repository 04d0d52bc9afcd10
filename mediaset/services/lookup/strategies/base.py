"""Common contract for media-specific lookup strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, FrozenSet, Generic, List, Optional, TypeVar

from mediaset import logging_manager as log_mgr

from ..types import IdentifierKind, LookupResponse, MediaType

logger = log_mgr.get_logger().getChild("services.lookup.strategies")

ResponseT = TypeVar("ResponseT", bound=LookupResponse)


class LookupStrategy(ABC, Generic[ResponseT]):
    """Turn an identifier into a normalized response for one media type.

    Subclasses declare the media type they produce and the identifier kinds
    they accept. ``lookup`` returns None when the record cannot be found and
    lets :class:`~mediaset.services.lookup.errors.RateLimitedError` and task
    cancellation propagate.
    """

    media_type: ClassVar[MediaType]
    supported_identifiers: ClassVar[FrozenSet[IdentifierKind]]

    def can_handle(self, media_type: MediaType, identifier_kind: IdentifierKind) -> bool:
        return media_type == self.media_type and identifier_kind in self.supported_identifiers

    @abstractmethod
    async def lookup(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[ResponseT]:
        """Resolve ``identifier_value`` to a normalized response, or None."""

    async def search_by_title(self, title: str) -> List[ResponseT]:
        """Free-text search; strategies without a title search return nothing."""
        return []

    @property
    def supports_title_search(self) -> bool:
        return type(self).search_by_title is not LookupStrategy.search_by_title

    def _log_miss(self, reason: str, identifier_value: str, **extra: object) -> None:
        logger.info(
            "%s lookup for %s found nothing: %s",
            self.media_type.value,
            identifier_value,
            reason,
            extra={"event": "lookup.strategy.miss", "media_type": self.media_type.value, **extra},
        )


__all__ = ["LookupStrategy", "ResponseT"]
