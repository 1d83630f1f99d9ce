"""Catalog queries.

Books are owned by the catalog; the cart and order modules only check that a
book exists or resolve a set of book identifiers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bookstore.store import utc_now

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bookstore.store import Document, DocumentStore, UpdateResult

LOGGER = logging.getLogger(__name__)

BOOKS = "books"
RECENT_BOOKS_LIMIT = 4


class BookQueries:
    """Repository for book documents."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def add_book(self, fields: dict[str, Any]) -> str:
        """Insert a book and return its identifier."""
        now = utc_now()
        book_id = await self.store.insert_one(
            BOOKS,
            {**fields, "createdAt": now, "updatedAt": now},
        )
        LOGGER.info("Added book %s (%s)", book_id, fields.get("title"))
        return book_id

    async def update_book(self, book_id: str, fields: dict[str, Any]) -> UpdateResult:
        """Overwrite the given fields of a book."""
        return await self.store.set_fields(
            BOOKS,
            book_id,
            {**fields, "updatedAt": utc_now()},
        )

    async def delete_book(self, book_id: str) -> int:
        """Delete a book.

        Carts, favourites and orders that still reference it are left as they
        are; their listings skip references that no longer resolve.
        """
        deleted = await self.store.delete_one(BOOKS, book_id)
        if deleted:
            LOGGER.info("Deleted book %s", book_id)
        return deleted

    async def all_books(self) -> list[Document]:
        return await self.store.find(BOOKS, sort="createdAt", descending=True)

    async def recent_books(self, limit: int = RECENT_BOOKS_LIMIT) -> list[Document]:
        return await self.store.find(BOOKS, sort="createdAt", descending=True, limit=limit)

    async def get_book(self, book_id: str) -> Document | None:
        return await self.store.find_one(BOOKS, book_id)

    async def exists(self, book_id: str) -> bool:
        return await self.store.count(BOOKS, {"_id": book_id}) > 0

    async def resolve(self, book_ids: Iterable[str]) -> dict[str, Document]:
        """Look up many books at once, keyed by identifier."""
        return await self.store.find_many(BOOKS, book_ids)
