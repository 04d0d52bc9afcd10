"""Book lookups through OpenLibrary, with barcode resolution via UPCitemdb."""

from __future__ import annotations

from typing import List, Optional

from ..clients.openlibrary import READABLE_IDENTIFIER_KINDS, OpenLibraryClient
from ..clients.upcitemdb import UpcItemDbClient
from ..types import BookResponse, IdentifierKind, MediaType
from .base import LookupStrategy


class BookLookupStrategy(LookupStrategy[BookResponse]):
    media_type = MediaType.BOOKS
    supported_identifiers = frozenset(
        {
            IdentifierKind.ISBN,
            IdentifierKind.LCCN,
            IdentifierKind.OCLC,
            IdentifierKind.OLID,
            IdentifierKind.UPC,
            IdentifierKind.EAN,
        }
    )

    def __init__(self, openlibrary: OpenLibraryClient, upcitemdb: UpcItemDbClient) -> None:
        self._openlibrary = openlibrary
        self._upcitemdb = upcitemdb

    async def lookup(
        self, identifier_kind: IdentifierKind, identifier_value: str
    ) -> Optional[BookResponse]:
        if identifier_kind in READABLE_IDENTIFIER_KINDS:
            book = await self._openlibrary.get_readable_book(identifier_kind, identifier_value)
            if book is None and identifier_kind is IdentifierKind.ISBN:
                book = await self._openlibrary.get_book_by_isbn(identifier_value)
            if book is None:
                self._log_miss("no OpenLibrary record", identifier_value)
            return book

        if identifier_kind in (IdentifierKind.UPC, IdentifierKind.EAN):
            return await self._lookup_by_barcode(identifier_value)

        raise ValueError(f"Unsupported identifier kind for books: {identifier_kind.value}")

    async def _lookup_by_barcode(self, code: str) -> Optional[BookResponse]:
        response = await self._upcitemdb.get_item_by_code(code)
        if response is None or not response.items:
            self._log_miss("barcode not in UPCitemdb", code)
            return None

        isbn = response.items[0].isbn
        if not isbn:
            self._log_miss("barcode record has no ISBN", code)
            return None
        return await self.lookup(IdentifierKind.ISBN, isbn)

    async def search_by_title(self, title: str) -> List[BookResponse]:
        return await self._openlibrary.search_by_title(title)


__all__ = ["BookLookupStrategy"]
