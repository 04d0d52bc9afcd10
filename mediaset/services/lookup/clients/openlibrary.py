"""OpenLibrary API client for book metadata."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mediaset import logging_manager as log_mgr
from mediaset.config_manager.constants import DEFAULT_OPENLIBRARY_URL

from ..extraction import (
    coerce_int,
    extract_authors,
    extract_number_of_pages,
    extract_publishers,
    extract_subjects,
    get_list,
    get_mapping,
    get_str,
)
from ..normalization import deduplicate_subjects, title_case
from ..types import Author, BookResponse, IdentifierKind, LookupProvider, Publisher, Subject
from .base import BaseLookupClient

logger = log_mgr.get_logger().getChild("services.lookup.clients.openlibrary")

COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
READABLE_IDENTIFIER_KINDS = frozenset(
    {IdentifierKind.ISBN, IdentifierKind.LCCN, IdentifierKind.OCLC, IdentifierKind.OLID}
)
_SEARCH_LIMIT = 10


def _cover_url(cover_id: Any) -> Optional[str]:
    parsed = coerce_int(cover_id)
    if parsed is None:
        return None
    return COVER_URL_TEMPLATE.format(cover_id=parsed)


def _map_readable_record(record: Mapping[str, Any]) -> Optional[BookResponse]:
    data = record.get("data")
    if not isinstance(data, Mapping):
        return None

    publish_dates = [value for value in get_list(record, "publish_dates") if isinstance(value, str)]
    publish_date = publish_dates[0] if publish_dates else get_str(data, "publish_date")

    details = get_mapping(get_mapping(record, "details"), "details")
    physical_format = details.get("physical_format")
    media_format = title_case(physical_format) if isinstance(physical_format, str) else ""
    covers = get_list(details, "covers")
    image_url = _cover_url(covers[0]) if covers else None

    return BookResponse(
        title=get_str(data, "title"),
        subtitle=get_str(data, "subtitle"),
        authors=extract_authors(data),
        number_of_pages=extract_number_of_pages(data),
        publishers=extract_publishers(data),
        publish_date=publish_date,
        subjects=deduplicate_subjects(extract_subjects(data)),
        format=media_format,
        image_url=image_url,
    )


def _map_bibkeys_entry(data: Mapping[str, Any]) -> BookResponse:
    cover = get_mapping(data, "cover")
    image_url = get_str(cover, "large") or get_str(cover, "medium") or None
    return BookResponse(
        title=get_str(data, "title"),
        subtitle=get_str(data, "subtitle"),
        authors=extract_authors(data),
        number_of_pages=extract_number_of_pages(data),
        publishers=extract_publishers(data),
        publish_date=get_str(data, "publish_date"),
        subjects=deduplicate_subjects(extract_subjects(data)),
        format="",
        image_url=image_url,
    )


def _map_search_doc(doc: Mapping[str, Any]) -> Optional[BookResponse]:
    title = get_str(doc, "title").strip()
    if not title:
        return None
    authors = [
        Author(name=name) for name in get_list(doc, "author_name") if isinstance(name, str) and name
    ]
    publishers = [
        Publisher(name=name) for name in get_list(doc, "publisher") if isinstance(name, str) and name
    ][:3]
    subjects = [
        Subject(name=name) for name in get_list(doc, "subject") if isinstance(name, str) and name
    ][:5]
    first_year = coerce_int(doc.get("first_publish_year"))
    pages = coerce_int(doc.get("number_of_pages_median"))
    return BookResponse(
        title=title,
        subtitle=get_str(doc, "subtitle"),
        authors=authors,
        number_of_pages=pages or 0,
        publishers=publishers,
        publish_date=str(first_year) if first_year is not None else "",
        subjects=deduplicate_subjects(subjects),
        format="",
        image_url=_cover_url(doc.get("cover_i")),
    )


class OpenLibraryClient(BaseLookupClient):
    """Client for OpenLibrary's readable, bibkeys and search endpoints."""

    name = LookupProvider.OPENLIBRARY
    requires_api_key = False

    def __init__(self, *, base_url: str = DEFAULT_OPENLIBRARY_URL, **kwargs: Any) -> None:
        super().__init__(base_url=base_url, **kwargs)

    async def get_readable_book(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[BookResponse]:
        """Fetch a book from ``api/volumes/brief/{kind}/{value}.json``.

        Args:
            identifier_kind: One of isbn, lccn, oclc or olid.
            identifier_value: The identifier as entered.

        Returns:
            The book built from the first record, or None when there is no
            record or the record has no ``data`` block.

        Raises:
            ValueError: If ``identifier_kind`` is not served by this endpoint.
            RateLimitedError: If OpenLibrary throttles the request.
        """
        if identifier_kind not in READABLE_IDENTIFIER_KINDS:
            raise ValueError(f"OpenLibrary cannot look up {identifier_kind.value} identifiers")
        value = identifier_value.strip()
        if not value:
            return None

        logger.info(
            "Looking up %s %s on OpenLibrary",
            identifier_kind.value,
            value,
            extra={"event": "lookup.openlibrary.readable", "provider": self.name.value},
        )
        payload = self._unwrap(
            await self._get_json(f"api/volumes/brief/{identifier_kind.value}/{value}.json")
        )
        records = get_mapping(payload, "records")
        if not records:
            logger.info(
                "No OpenLibrary record for %s %s",
                identifier_kind.value,
                value,
                extra={"event": "lookup.openlibrary.no_record", "provider": self.name.value},
            )
            return None

        first_record = next(iter(records.values()))
        if not isinstance(first_record, Mapping):
            return None
        return _map_readable_record(first_record)

    async def get_readable_book_by_isbn(self, isbn: str) -> Optional[BookResponse]:
        return await self.get_readable_book(IdentifierKind.ISBN, isbn)

    async def get_readable_book_by_lccn(self, lccn: str) -> Optional[BookResponse]:
        return await self.get_readable_book(IdentifierKind.LCCN, lccn)

    async def get_readable_book_by_oclc(self, oclc: str) -> Optional[BookResponse]:
        return await self.get_readable_book(IdentifierKind.OCLC, oclc)

    async def get_readable_book_by_olid(self, olid: str) -> Optional[BookResponse]:
        return await self.get_readable_book(IdentifierKind.OLID, olid)

    async def get_book_by_isbn(self, isbn: str) -> Optional[BookResponse]:
        """Fetch a book from the legacy ``api/books`` bibkeys endpoint."""
        value = isbn.strip()
        if not value:
            return None
        bibkey = f"ISBN:{value}"
        payload = self._unwrap(
            await self._get_json(
                "api/books", params={"bibkeys": bibkey, "format": "json", "jscmd": "data"}
            )
        )
        entry = get_mapping(payload, bibkey)
        if not entry:
            return None
        return _map_bibkeys_entry(entry)

    async def search_by_title(self, title: str) -> List[BookResponse]:
        """Search ``search.json`` by title and map every usable document."""
        query = title.strip()
        if not query:
            return []
        payload = self._unwrap(
            await self._get_json("search.json", params={"title": query, "limit": _SEARCH_LIMIT})
        )
        results: List[BookResponse] = []
        for doc in get_list(payload, "docs"):
            if not isinstance(doc, Mapping):
                continue
            book = _map_search_doc(doc)
            if book is not None:
                results.append(book)
        logger.info(
            "OpenLibrary title search for %r returned %s result(s)",
            query,
            len(results),
            extra={"event": "lookup.openlibrary.search", "provider": self.name.value},
        )
        return results


__all__ = ["COVER_URL_TEMPLATE", "OpenLibraryClient", "READABLE_IDENTIFIER_KINDS"]
