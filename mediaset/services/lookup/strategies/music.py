"""Music lookups against MusicBrainz."""

from __future__ import annotations

import re
from typing import List, Optional

from ..clients.musicbrainz import MusicBrainzClient
from ..normalization import genres_from_tags
from ..provider_models import Release
from ..types import DiscTrack, IdentifierKind, MediaType, MusicResponse
from .base import LookupStrategy

_TRACK_NUMBER = re.compile(r"[+-]?[0-9]+")


def map_music_response(release: Release) -> MusicResponse:
    """Flatten a release into the music response.

    Tracks whose number is not numeric (vinyl sides such as ``A1``) are left
    out of ``disc_list`` but still count towards ``tracks`` and ``duration``.
    """
    disc_list: List[DiscTrack] = []
    total_tracks = 0
    total_duration = 0
    has_duration = False
    for medium in release.media:
        total_tracks += medium.track_count
        for track in medium.tracks:
            length = track.effective_length
            if length is not None:
                total_duration += length
                has_duration = True
            number = track.number.strip()
            if _TRACK_NUMBER.fullmatch(number):
                disc_list.append(
                    DiscTrack(track_number=int(number), title=track.title, duration=length)
                )

    return MusicResponse(
        title=release.title,
        artist=release.artist_credits[0].name if release.artist_credits else "",
        release_date=release.date,
        genres=genres_from_tags(release.tags),
        duration=total_duration if has_duration else None,
        label=release.labels[0].name if release.labels else "",
        tracks=total_tracks or None,
        discs=len(release.media) or None,
        disc_list=disc_list,
        format=release.media[0].format if release.media else "",
        image_url=None,
    )


class MusicLookupStrategy(LookupStrategy[MusicResponse]):
    media_type = MediaType.MUSICS
    supported_identifiers = frozenset({IdentifierKind.UPC, IdentifierKind.EAN})

    def __init__(self, musicbrainz: MusicBrainzClient) -> None:
        self._musicbrainz = musicbrainz

    async def lookup(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[MusicResponse]:
        found = await self._musicbrainz.get_release_by_barcode(identifier_value)
        if found is None:
            self._log_miss("no release for barcode", identifier_value)
            return None

        release = await self._musicbrainz.get_release_by_id(found.id)
        if release is None:
            self._log_miss("release details unavailable", identifier_value, release_id=found.id)
            return None
        return map_music_response(release)

    async def search_by_title(self, title: str) -> List[MusicResponse]:
        releases = await self._musicbrainz.search_releases_by_title(title)
        return [map_music_response(release) for release in releases]


__all__ = ["MusicLookupStrategy", "map_music_response"]
