from __future__ import annotations

import pytest

from mediaset.services.lookup.errors import RateLimitedError, UnsupportedLookupError
from mediaset.services.lookup.types import (
    BookResponse,
    DiscTrack,
    Identifier,
    IdentifierKind,
    MediaType,
    MusicResponse,
    Publisher,
)

pytestmark = pytest.mark.lookup


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("books", MediaType.BOOKS), ("MOVIES", MediaType.MOVIES), (" Games ", MediaType.GAMES), ("tv", None)],
)
def test_media_type_parse(raw: str, expected) -> None:
    assert MediaType.parse(raw) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("ISBN", IdentifierKind.ISBN), ("upc", IdentifierKind.UPC), ("Ean", IdentifierKind.EAN), ("asin", None)],
)
def test_identifier_kind_parse(raw: str, expected) -> None:
    assert IdentifierKind.parse(raw) is expected


def test_identifier_renders_kind_and_value() -> None:
    assert str(Identifier(IdentifierKind.UPC, "012345678905")) == "upc:012345678905"


def test_response_serialization_uses_snake_case() -> None:
    book = BookResponse(title="Dune", publishers=[Publisher("Chilton")], number_of_pages=412)
    assert book.to_dict()["number_of_pages"] == 412
    assert book.to_dict()["publishers"] == [{"name": "Chilton"}]

    music = MusicResponse(title="Kind of Blue", disc_list=[DiscTrack(1, "So What", 562000)])
    assert music.to_dict()["disc_list"] == [
        {"track_number": 1, "title": "So What", "duration": 562000}
    ]


def test_error_messages() -> None:
    error = UnsupportedLookupError(MediaType.MUSICS, IdentifierKind.ISBN)
    assert str(error) == "No strategy found for Musics with identifier type: isbn"

    limited = RateLimitedError("upcitemdb", 429, retry_after=30.0)
    assert limited.status_code == 429
    assert limited.retry_after == 30.0
    assert "upcitemdb" in str(limited) and "429" in str(limited)
