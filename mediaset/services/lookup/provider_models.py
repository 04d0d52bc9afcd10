"""Provider payloads reduced to the fields the lookup strategies consume."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class UpcItem:
    """A product record from the barcode database."""

    ean: str = ""
    title: str = ""
    description: str = ""
    category: str = ""
    brand: str = ""
    model: str = ""
    isbn: Optional[str] = None


@dataclass(frozen=True, slots=True)
class UpcItemResponse:
    code: str = ""
    total: int = 0
    items: List[UpcItem] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MovieSearchResult:
    id: int
    title: str
    release_date: str = ""
    overview: str = ""


@dataclass(frozen=True, slots=True)
class MovieDetails:
    id: int
    title: str
    genres: List[str] = field(default_factory=list)
    production_companies: List[str] = field(default_factory=list)
    release_date: str = ""
    vote_average: float = 0.0
    runtime: Optional[int] = None
    overview: str = ""
    poster_path: Optional[str] = None


@dataclass(frozen=True, slots=True)
class GameSearchResult:
    """A game catalog search hit.

    ``detail_ref`` is whatever the originating catalog needs to fetch the full
    record: an API detail URL for GiantBomb, a numeric id for IGDB.
    """

    id: str
    name: str
    release_date: str = ""
    summary: str = ""
    detail_ref: str = ""


@dataclass(frozen=True, slots=True)
class GamePlatform:
    name: str
    abbreviation: str = ""


@dataclass(frozen=True, slots=True)
class GameDetails:
    name: str
    genres: List[str] = field(default_factory=list)
    developers: List[str] = field(default_factory=list)
    publishers: List[str] = field(default_factory=list)
    platforms: List[GamePlatform] = field(default_factory=list)
    release_date: str = ""
    description: str = ""
    rating: str = ""
    image_url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ArtistCredit:
    name: str
    artist_id: str = ""


@dataclass(frozen=True, slots=True)
class ReleaseLabel:
    name: str
    label_id: str = ""


@dataclass(frozen=True, slots=True)
class ReleaseTrack:
    id: str = ""
    number: str = ""
    title: str = ""
    length: Optional[int] = None
    recording_length: Optional[int] = None

    @property
    def effective_length(self) -> Optional[int]:
        """Track length in milliseconds, falling back to the recording length."""
        return self.length if self.length is not None else self.recording_length


@dataclass(frozen=True, slots=True)
class ReleaseMedia:
    format: str = ""
    track_count: int = 0
    tracks: List[ReleaseTrack] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ReleaseTag:
    name: str
    count: int = 0


@dataclass(frozen=True, slots=True)
class Release:
    """A MusicBrainz release with the includes requested by the client."""

    id: str
    title: str
    date: str = ""
    country: str = ""
    barcode: str = ""
    status: str = ""
    artist_credits: List[ArtistCredit] = field(default_factory=list)
    labels: List[ReleaseLabel] = field(default_factory=list)
    media: List[ReleaseMedia] = field(default_factory=list)
    tags: List[ReleaseTag] = field(default_factory=list)


__all__ = [
    "ArtistCredit",
    "GameDetails",
    "GamePlatform",
    "GameSearchResult",
    "MovieDetails",
    "MovieSearchResult",
    "Release",
    "ReleaseLabel",
    "ReleaseMedia",
    "ReleaseTag",
    "ReleaseTrack",
    "UpcItem",
    "UpcItemResponse",
]
