"""Catalog routes: public browsing and admin-only book management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header

from bookstore.auth import Validate
from bookstore.auth.models import MessageResponse
from bookstore.common import NotFound, Role
from bookstore.store import Document

from .models import Book, BookAddedResponse, BookForm, BookListResponse, BookResponse
from .queries import BookQueries

LOGGER = logging.getLogger(__name__)


async def _update_book(
    book_queries: BookQueries,
    book_id: str,
    form: BookForm,
) -> MessageResponse:
    result = await book_queries.update_book(book_id, form.to_document())
    if result.matched_count == 0:
        msg = "Book not found"
        raise NotFound(msg)
    return MessageResponse(message="Book updated successfully")


async def _delete_book(book_queries: BookQueries, book_id: str) -> MessageResponse:
    if not await book_queries.delete_book(book_id):
        msg = "Book not found"
        raise NotFound(msg)
    return MessageResponse(message="Book deleted successfully")


def configure_catalog_router(
    router: APIRouter,
    book_queries: BookQueries,
    validate: Validate,
) -> APIRouter:
    """Configure the catalog router.

    :param router: The APIRouter to configure
    :param book_queries: The BookQueries instance for catalog operations
    :param validate: The Validate instance for authentication and authorization
    :return: The configured APIRouter
    """
    require_admin = validate.role(Role.ADMIN)

    @router.post("/add-book", response_model=BookAddedResponse)
    async def add_book(
        form: BookForm,
        admin: Annotated[Document, Depends(require_admin)],
    ) -> BookAddedResponse:
        book_id = await book_queries.add_book(form.to_document())
        LOGGER.debug("Book %s added by %s", book_id, admin["username"])
        return BookAddedResponse(book_id=book_id)

    @router.put("/update-book", response_model=MessageResponse)
    async def update_book(
        form: BookForm,
        bookid: Annotated[str, Header()],
        _admin: Annotated[Document, Depends(require_admin)],
    ) -> MessageResponse:
        return await _update_book(book_queries, bookid, form)

    @router.delete("/delete-book", response_model=MessageResponse)
    async def delete_book(
        bookid: Annotated[str, Header()],
        _admin: Annotated[Document, Depends(require_admin)],
    ) -> MessageResponse:
        return await _delete_book(book_queries, bookid)

    @router.get("/get-all-book", response_model=BookListResponse)
    async def get_all_books() -> BookListResponse:
        books = await book_queries.all_books()
        return BookListResponse(data=[Book.model_validate(book) for book in books])

    @router.get("/get-recent-books", response_model=BookListResponse)
    async def get_recent_books() -> BookListResponse:
        books = await book_queries.recent_books()
        return BookListResponse(data=[Book.model_validate(book) for book in books])

    @router.get("/get-book-by-id/{book_id}", response_model=BookResponse)
    async def get_book_by_id(book_id: str) -> BookResponse:
        book = await book_queries.get_book(book_id)
        if book is None:
            msg = "Book not found"
            raise NotFound(msg)
        return BookResponse(data=Book.model_validate(book))

    return router
