"""Exceptions raised by the lookup subsystem."""

from __future__ import annotations

from typing import Optional

from .types import IdentifierKind, MediaType


class MediaLookupError(Exception):
    """Base class for lookup failures that callers must handle explicitly."""


class RateLimitedError(MediaLookupError):
    """A provider asked us to slow down; the record may still exist."""

    def __init__(
        self,
        provider: str,
        status_code: Optional[int] = None,
        *,
        retry_after: Optional[float] = None,
        message: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        detail = message or f"{provider} rate limit exceeded"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)


class UnsupportedLookupError(MediaLookupError):
    """No registered strategy handles the requested media type and identifier kind."""

    def __init__(self, media_type: MediaType, identifier_kind: IdentifierKind) -> None:
        self.media_type = media_type
        self.identifier_kind = identifier_kind
        super().__init__(
            f"No strategy found for {media_type.value} with identifier type: {identifier_kind.value}"
        )


__all__ = ["MediaLookupError", "RateLimitedError", "UnsupportedLookupError"]
