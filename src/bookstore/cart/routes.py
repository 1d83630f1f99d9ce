"""Cart and favourites routes.

The acting account always comes from the verified token; the ``bookid``
header or path segment only names the book being acted on.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel

from bookstore.auth import Validate
from bookstore.catalog import Book
from bookstore.store import Document

from .reference_list import ReferenceList

LOGGER = logging.getLogger(__name__)


class StatusResponse(BaseModel):
    status: str = "Success"
    message: str


class BookListResponse(BaseModel):
    status: str = "Success"
    message: str | None = None
    data: list[Book]


async def _add(books: ReferenceList, user: Document, book_id: str) -> StatusResponse:
    if await books.add(user["_id"], book_id):
        return StatusResponse(message=f"Book added to {books.label}")
    return StatusResponse(message=f"Book is already in {books.label}")


async def _remove(books: ReferenceList, user: Document, book_id: str) -> StatusResponse:
    await books.remove(user["_id"], book_id)
    return StatusResponse(message=f"Book removed from {books.label}")


async def _list(books: ReferenceList, user: Document) -> BookListResponse:
    listed = await books.list(user["_id"])
    return BookListResponse(
        message=None if listed else f"No books in {books.label}",
        data=[Book.model_validate(book) for book in listed],
    )


def configure_cart_router(
    router: APIRouter,
    cart: ReferenceList,
    favourites: ReferenceList,
    validate: Validate,
) -> APIRouter:
    """Configure the cart and favourites router.

    :param router: The APIRouter to configure
    :param cart: Reference list backing the cart
    :param favourites: Reference list backing the favourites
    :param validate: The Validate instance for authentication and authorization
    :return: The configured APIRouter
    """
    CurrentUser = Annotated[Document, Depends(validate.identity)]  # noqa: N806

    @router.put("/add-to-cart", response_model=StatusResponse)
    async def add_to_cart(
        bookid: Annotated[str, Header()],
        user: CurrentUser,
    ) -> StatusResponse:
        return await _add(cart, user, bookid)

    @router.put("/remove-from-cart/{bookid}", response_model=StatusResponse)
    async def remove_from_cart(bookid: str, user: CurrentUser) -> StatusResponse:
        return await _remove(cart, user, bookid)

    @router.get("/get-user-cart", response_model=BookListResponse)
    async def get_user_cart(user: CurrentUser) -> BookListResponse:
        return await _list(cart, user)

    @router.put("/add-book-to-favourite", response_model=StatusResponse)
    async def add_book_to_favourite(
        bookid: Annotated[str, Header()],
        user: CurrentUser,
    ) -> StatusResponse:
        return await _add(favourites, user, bookid)

    @router.put("/remove-book-from-favourite", response_model=StatusResponse)
    async def remove_book_from_favourite(
        bookid: Annotated[str, Header()],
        user: CurrentUser,
    ) -> StatusResponse:
        return await _remove(favourites, user, bookid)

    @router.get("/get-favourite-books", response_model=BookListResponse)
    async def get_favourite_books(user: CurrentUser) -> BookListResponse:
        return await _list(favourites, user)

    return router
