"""Turning cart entries into orders, and reading orders back.

Placing an order writes three things per item: the order document, the
order id on the account's history, and the removal of the book from the
cart. A whole batch runs as one store transaction, so a failure part way
through leaves neither orders nor cart changes behind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bookstore.common import NotFound, ValidationFailure
from bookstore.store import utc_now

from .status import OrderStatus, OrderStatusMachine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bookstore.catalog import BookQueries
    from bookstore.store import Document, DocumentStore

LOGGER = logging.getLogger(__name__)

USERS = "users"
ORDERS = "orders"


class OrderWorkflow:
    """Places orders, lists them and moves them through their lifecycle."""

    def __init__(
        self,
        store: DocumentStore,
        book_queries: BookQueries,
        status_machine: OrderStatusMachine | None = None,
    ) -> None:
        self.store = store
        self.book_queries = book_queries
        self.status_machine = status_machine or OrderStatusMachine()

    async def place_order(self, user_id: str, book_ids: Sequence[str]) -> list[str]:
        """Create one order per book and clear those books from the cart.

        :param user_id: Identifier of the ordering account
        :param book_ids: Books to order, processed in the given order
        :return: Identifiers of the new orders
        :raises ValidationFailure: If no books are given
        :raises NotFound: If the account does not exist
        """
        if not book_ids:
            msg = "Validation failed"
            raise ValidationFailure(msg, ["order: at least one item is required"])

        order_ids = []
        async with self.store.transaction():
            if await self.store.find_one(USERS, user_id) is None:
                msg = "User not found"
                raise NotFound(msg)

            for book_id in book_ids:
                now = utc_now()
                order_id = await self.store.insert_one(
                    ORDERS,
                    {
                        "user": user_id,
                        "book": book_id,
                        "status": str(OrderStatus.PLACED),
                        "createdAt": now,
                        "updatedAt": now,
                    },
                )
                await self.store.push(USERS, user_id, "orders", order_id)
                await self.store.pull(USERS, user_id, "cart", book_id)
                order_ids.append(order_id)

        LOGGER.info("User %s placed %d order(s)", user_id, len(order_ids))
        return order_ids

    async def order_history(self, user_id: str) -> list[Document]:
        """Return the account's orders with their books, newest first.

        Orders, or books of orders, that no longer exist are skipped.
        """
        user = await self.store.find_one(USERS, user_id)
        if user is None:
            msg = "User not found"
            raise NotFound(msg)

        order_ids = user.get("orders", [])
        orders = await self.store.find_many(ORDERS, order_ids)
        books = await self.book_queries.resolve(
            order["book"] for order in orders.values()
        )

        history = []
        for order_id in reversed(order_ids):
            order = orders.get(order_id)
            if order is None or order["book"] not in books:
                continue
            history.append(
                {
                    "_id": order_id,
                    "book": books[order["book"]],
                    "status": order.get("status", str(OrderStatus.PLACED)),
                    "createdAt": order.get("createdAt"),
                },
            )
        return history

    async def all_orders(self) -> list[Document]:
        """Return every order with its book and account, newest first.

        Orders whose book or account no longer exists are skipped.
        """
        orders = await self.store.find(ORDERS, sort="createdAt", descending=True)
        books = await self.book_queries.resolve(order["book"] for order in orders)
        users = await self.store.find_many(USERS, (order["user"] for order in orders))

        populated = []
        for order in orders:
            book = books.get(order["book"])
            user = users.get(order["user"])
            if book is None or user is None:
                continue
            user = {key: value for key, value in user.items() if key != "password"}
            populated.append({**order, "book": book, "user": user})
        return populated

    async def update_status(self, order_id: str, target: str) -> str:
        """Move an order to ``target``.

        :return: The status now stored on the order
        :raises InvalidStatusError: If ``target`` is not a known status
        :raises InvalidTransitionError: If strict mode forbids the move
        :raises NotFound: If the order does not exist
        """
        self.status_machine.parse(target)

        async with self.store.transaction():
            order = await self.store.find_one(ORDERS, order_id)
            if order is None:
                msg = "Order not found"
                raise NotFound(msg)

            new_status = self.status_machine.transition(
                order.get("status", str(OrderStatus.PLACED)),
                target,
            )
            await self.store.set_fields(
                ORDERS,
                order_id,
                {"status": str(new_status), "updatedAt": utc_now()},
            )

        LOGGER.info("Order %s status changed to %s", order_id, new_status)
        return str(new_status)
