"""MusicBrainz web service client for music releases."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import (
    DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS,
    DEFAULT_MUSICBRAINZ_URL,
)

from ..extraction import coerce_int, get_int, get_list, get_mapping, get_optional_str, get_str
from ..provider_models import (
    ArtistCredit,
    Release,
    ReleaseLabel,
    ReleaseMedia,
    ReleaseTag,
    ReleaseTrack,
)
from ..rate_limiter import RateLimiter
from ..types import LookupProvider
from .base import BaseLookupClient

logger = log_mgr.get_logger().getChild("services.lookup.clients.musicbrainz")

RELEASE_INCLUDES = "artist-credits+labels+recordings+tags"
_SEARCH_LIMIT = 10


def _parse_track(entry: Mapping[str, Any]) -> ReleaseTrack:
    return ReleaseTrack(
        id=get_str(entry, "id"),
        number=get_str(entry, "number"),
        title=get_str(entry, "title"),
        length=coerce_int(entry.get("length")),
        recording_length=coerce_int(get_mapping(entry, "recording").get("length")),
    )


def _parse_media(entry: Mapping[str, Any]) -> ReleaseMedia:
    return ReleaseMedia(
        format=get_str(entry, "format"),
        track_count=get_int(entry, "track-count") or 0,
        tracks=[_parse_track(track) for track in get_list(entry, "tracks") if isinstance(track, Mapping)],
    )


def parse_release(payload: Mapping[str, Any]) -> Optional[Release]:
    release_id = get_optional_str(payload, "id")
    if not release_id:
        return None

    credits: List[ArtistCredit] = []
    for entry in get_list(payload, "artist-credit"):
        if not isinstance(entry, Mapping):
            continue
        artist = get_mapping(entry, "artist")
        name = get_optional_str(entry, "name") or get_optional_str(artist, "name")
        if name:
            credits.append(ArtistCredit(name=name, artist_id=get_str(artist, "id")))

    labels: List[ReleaseLabel] = []
    for entry in get_list(payload, "label-info"):
        label = get_mapping(entry, "label")
        name = get_optional_str(label, "name")
        if name:
            labels.append(ReleaseLabel(name=name, label_id=get_str(label, "id")))

    tags = [
        ReleaseTag(name=get_str(entry, "name"), count=get_int(entry, "count") or 0)
        for entry in get_list(payload, "tags")
        if isinstance(entry, Mapping) and get_optional_str(entry, "name")
    ]

    return Release(
        id=release_id,
        title=get_str(payload, "title"),
        date=get_str(payload, "date"),
        country=get_str(payload, "country"),
        barcode=get_str(payload, "barcode"),
        status=get_str(payload, "status"),
        artist_credits=credits,
        labels=labels,
        media=[_parse_media(entry) for entry in get_list(payload, "media") if isinstance(entry, Mapping)],
        tags=tags,
    )


class MusicBrainzClient(BaseLookupClient):
    """Client for the MusicBrainz ``ws/2`` release API.

    MusicBrainz allows one request per second per client and answers HTTP 503
    when that is exceeded. Every request goes through a :class:`RateLimiter`;
    pass the same limiter to every instance so they share one gate.
    """

    name = LookupProvider.MUSICBRAINZ
    requires_api_key = False
    rate_limit_statuses = frozenset({503})

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_MUSICBRAINZ_URL,
        rate_limiter: Optional[RateLimiter] = None,
        **kwargs: Any,
    ) -> None:
        limiter = rate_limiter or RateLimiter(
            DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS, name=LookupProvider.MUSICBRAINZ.value
        )
        super().__init__(base_url=base_url, rate_limiter=limiter, **kwargs)

    async def get_release_by_barcode(self, barcode: str) -> Optional[Release]:
        """Return the first release whose barcode matches, or None."""
        value = barcode.strip()
        if not value:
            return None
        logger.info(
            "Looking up music release by barcode %s",
            value,
            extra={"event": "lookup.musicbrainz.barcode", "provider": self.name.value},
        )
        payload = self._unwrap(
            await self._get_json("ws/2/release/", params={"query": f"barcode:{value}", "fmt": "json"})
        )
        releases = [entry for entry in get_list(payload, "releases") if isinstance(entry, Mapping)]
        if not releases:
            logger.info(
                "No releases found for barcode %s",
                value,
                extra={"event": "lookup.musicbrainz.no_release", "provider": self.name.value},
            )
            return None
        return parse_release(releases[0])

    async def get_release_by_id(self, release_id: str) -> Optional[Release]:
        """Fetch a release with artist credits, labels, recordings and tags."""
        value = release_id.strip()
        if not value:
            return None
        payload = self._unwrap(
            await self._get_json(f"ws/2/release/{value}?inc={RELEASE_INCLUDES}&fmt=json")
        )
        if not isinstance(payload, Mapping):
            return None
        release = parse_release(payload)
        if release is not None:
            logger.info(
                "Retrieved release %s: %s",
                value,
                release.title,
                extra={"event": "lookup.musicbrainz.release", "provider": self.name.value},
            )
        return release

    async def search_releases_by_title(self, title: str) -> List[Release]:
        """Search releases by title, returning up to ten matches."""
        query = title.strip()
        if not query:
            return []
        payload = self._unwrap(
            await self._get_json(
                "ws/2/release/",
                params={"query": f"release:{query}", "limit": _SEARCH_LIMIT, "fmt": "json"},
            )
        )
        releases: List[Release] = []
        for entry in get_list(payload, "releases"):
            if not isinstance(entry, Mapping):
                continue
            release = parse_release(entry)
            if release is not None:
                releases.append(release)
        return releases


__all__ = ["MusicBrainzClient", "RELEASE_INCLUDES", "parse_release"]
