"""Per-account ordered lists of book references.

The cart and the favourites share one contract: adding is idempotent,
removing an absent book is an error, and listing resolves the references
against the catalog, most recently added first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bookstore.common import NotFound, ValidationFailure

if TYPE_CHECKING:
    from bookstore.catalog import BookQueries
    from bookstore.store import Document, DocumentStore

LOGGER = logging.getLogger(__name__)

USERS = "users"


class NotInListError(ValidationFailure):
    """Raised when removing a book that is not in the list."""


class ReferenceList:
    """One named array of book references on every account document.

    :param store: Document store holding the users collection
    :param book_queries: Catalog used to check and resolve references
    :param field: Name of the array field, e.g. ``cart``
    :param label: Human readable name used in messages
    """

    def __init__(
        self,
        store: DocumentStore,
        book_queries: BookQueries,
        field: str,
        label: str,
    ) -> None:
        self.store = store
        self.book_queries = book_queries
        self.field = field
        self.label = label

    async def add(self, user_id: str, book_id: str) -> bool:
        """Add a book unless it is already present.

        :return: True if the book was added, False if it was already there
        :raises NotFound: If the account or the book does not exist
        """
        references = await self._references(user_id)
        if book_id in references:
            LOGGER.debug("Book %s already in %s of %s", book_id, self.label, user_id)
            return False

        if not await self.book_queries.exists(book_id):
            msg = "Book not found"
            raise NotFound(msg)

        result = await self.store.push(USERS, user_id, self.field, book_id, unique=True)
        if result.matched_count == 0:
            msg = "User not found"
            raise NotFound(msg)
        if result.modified_count == 0:
            LOGGER.debug("Book %s already in %s of %s", book_id, self.label, user_id)
            return False

        LOGGER.debug("Book %s added to %s of %s", book_id, self.label, user_id)
        return True

    async def remove(self, user_id: str, book_id: str) -> None:
        """Remove a book that is in the list.

        :raises NotFound: If the account does not exist
        :raises NotInListError: If the book is not in the list
        """
        references = await self._references(user_id)
        if book_id not in references:
            msg = f"Book is not in the {self.label}"
            raise NotInListError(msg)

        await self.store.pull(USERS, user_id, self.field, book_id)
        LOGGER.debug("Book %s removed from %s of %s", book_id, self.label, user_id)

    async def list(self, user_id: str) -> list[Document]:
        """Return the listed books, most recently added first.

        References to books that no longer exist are skipped.
        """
        references = await self._references(user_id)
        books = await self.book_queries.resolve(references)
        return [books[ref] for ref in reversed(references) if ref in books]

    async def _references(self, user_id: str) -> list[str]:
        user = await self.store.find_one(USERS, user_id)
        if user is None:
            msg = "User not found"
            raise NotFound(msg)
        return list(user.get(self.field, []))


def cart_store(store: DocumentStore, book_queries: BookQueries) -> ReferenceList:
    """Return the list backing each account's cart."""
    return ReferenceList(store, book_queries, "cart", "cart")


def favourites_store(store: DocumentStore, book_queries: BookQueries) -> ReferenceList:
    """Return the list backing each account's favourites."""
    return ReferenceList(store, book_queries, "favourites", "favourites")
