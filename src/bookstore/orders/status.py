"""Order lifecycle statuses and the transitions between them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from bookstore.common import ValidationFailure

LOGGER = logging.getLogger(__name__)


class OrderStatus(StrEnum):
    """Every status an order can be in."""

    PLACED = "Placed"
    OUT_FOR_DELIVERY = "Out for delivery"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.CANCELED},
    ),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


class InvalidStatusError(ValidationFailure):
    """Raised for a status value outside :class:`OrderStatus`."""


class InvalidTransitionError(ValidationFailure):
    """Raised in strict mode for a move the lifecycle graph does not allow."""


@dataclass(frozen=True)
class OrderStatusMachine:
    """Decides whether an order may move to a requested status.

    In the default permissive mode any known status is accepted from any
    current status. With ``strict`` set, only the edges in
    ``ALLOWED_TRANSITIONS`` are accepted.
    """

    strict: bool = False

    @staticmethod
    def parse(value: str) -> OrderStatus:
        """Return the status named by ``value``.

        :raises InvalidStatusError: If ``value`` is not a known status
        """
        try:
            return OrderStatus(value)
        except ValueError as e:
            msg = "Invalid status value"
            raise InvalidStatusError(msg, [f"status: unknown value {value!r}"]) from e

    def transition(self, current: str, target: str) -> OrderStatus:
        """Validate a move from ``current`` to ``target``.

        :param current: The order's stored status
        :param target: The requested status
        :return: The new status
        :raises InvalidStatusError: If ``target`` is not a known status
        :raises InvalidTransitionError: In strict mode, if the edge is not allowed
        """
        new_status = self.parse(target)
        if not self.strict:
            return new_status

        current_status = self.parse(current)
        if new_status not in ALLOWED_TRANSITIONS[current_status]:
            LOGGER.debug("Rejected transition %s -> %s", current_status, new_status)
            msg = f"Cannot change order status from {current_status} to {new_status}"
            raise InvalidTransitionError(msg)
        return new_status
