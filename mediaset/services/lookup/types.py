"""Core type definitions for barcode and catalog identifier lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class MediaType(str, Enum):
    """Catalog entity type a lookup produces."""

    BOOKS = "Books"
    MOVIES = "Movies"
    GAMES = "Games"
    MUSICS = "Musics"

    @classmethod
    def parse(cls, value: str) -> Optional["MediaType"]:
        """Resolve ``value`` case-insensitively, returning None when unknown."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class IdentifierKind(str, Enum):
    """Category of product or catalog code used as a lookup key."""

    ISBN = "isbn"
    LCCN = "lccn"
    OCLC = "oclc"
    OLID = "olid"
    UPC = "upc"
    EAN = "ean"

    @classmethod
    def parse(cls, value: str) -> Optional["IdentifierKind"]:
        """Resolve ``value`` case-insensitively, returning None when unknown."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


class LookupProvider(str, Enum):
    """External metadata providers."""

    OPENLIBRARY = "openlibrary"
    UPCITEMDB = "upcitemdb"
    TMDB = "tmdb"
    GIANTBOMB = "giantbomb"
    IGDB = "igdb"
    MUSICBRAINZ = "musicbrainz"


@dataclass(frozen=True, slots=True)
class Identifier:
    """A tagged identifier value such as an ISBN or a UPC barcode."""

    kind: IdentifierKind
    value: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


@dataclass(frozen=True, slots=True)
class Author:
    name: str
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True, slots=True)
class Publisher:
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True, slots=True)
class Subject:
    name: str
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True, slots=True)
class BookResponse:
    """Normalized book metadata."""

    title: str
    subtitle: str = ""
    authors: List[Author] = field(default_factory=list)
    number_of_pages: int = 0
    publishers: List[Publisher] = field(default_factory=list)
    publish_date: str = ""
    subjects: List[Subject] = field(default_factory=list)
    format: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "authors": [author.to_dict() for author in self.authors],
            "number_of_pages": self.number_of_pages,
            "publishers": [publisher.to_dict() for publisher in self.publishers],
            "publish_date": self.publish_date,
            "subjects": [subject.to_dict() for subject in self.subjects],
            "format": self.format,
            "image_url": self.image_url,
        }


@dataclass(frozen=True, slots=True)
class MovieResponse:
    """Normalized movie metadata."""

    title: str
    genres: List[str] = field(default_factory=list)
    studios: List[str] = field(default_factory=list)
    release_date: str = ""
    rating: str = ""
    runtime: Optional[int] = None
    plot: str = ""
    format: str = ""
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "title": self.title,
            "genres": list(self.genres),
            "studios": list(self.studios),
            "release_date": self.release_date,
            "rating": self.rating,
            "runtime": self.runtime,
            "plot": self.plot,
            "format": self.format,
            "image_url": self.image_url,
        }


@dataclass(frozen=True, slots=True)
class GameResponse:
    """Normalized video game metadata."""

    title: str
    platform: str = ""
    genres: List[str] = field(default_factory=list)
    developers: List[str] = field(default_factory=list)
    publishers: List[str] = field(default_factory=list)
    release_date: str = ""
    rating: str = ""
    description: str = ""
    format: str = ""
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "title": self.title,
            "platform": self.platform,
            "genres": list(self.genres),
            "developers": list(self.developers),
            "publishers": list(self.publishers),
            "release_date": self.release_date,
            "rating": self.rating,
            "description": self.description,
            "format": self.format,
            "image_url": self.image_url,
        }


@dataclass(frozen=True, slots=True)
class DiscTrack:
    """A single numbered track on a music release."""

    track_number: int
    title: str
    duration: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"track_number": self.track_number, "title": self.title, "duration": self.duration}


@dataclass(frozen=True, slots=True)
class MusicResponse:
    """Normalized music release metadata."""

    title: str
    artist: str = ""
    release_date: str = ""
    genres: List[str] = field(default_factory=list)
    duration: Optional[int] = None
    label: str = ""
    tracks: Optional[int] = None
    discs: Optional[int] = None
    disc_list: List[DiscTrack] = field(default_factory=list)
    format: str = ""
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "title": self.title,
            "artist": self.artist,
            "release_date": self.release_date,
            "genres": list(self.genres),
            "duration": self.duration,
            "label": self.label,
            "tracks": self.tracks,
            "discs": self.discs,
            "disc_list": [track.to_dict() for track in self.disc_list],
            "format": self.format,
            "image_url": self.image_url,
        }


LookupResponse = Union[BookResponse, MovieResponse, GameResponse, MusicResponse]


__all__ = [
    "Author",
    "BookResponse",
    "DiscTrack",
    "GameResponse",
    "Identifier",
    "IdentifierKind",
    "LookupProvider",
    "LookupResponse",
    "MediaType",
    "MovieResponse",
    "MusicResponse",
    "Publisher",
    "Subject",
]
