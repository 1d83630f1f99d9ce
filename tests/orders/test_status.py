"""Tests for order status transitions."""

import pytest

from bookstore.orders import (
    InvalidStatusError,
    InvalidTransitionError,
    OrderStatus,
    OrderStatusMachine,
)


def test_parse_known_and_unknown_values() -> None:
    assert OrderStatusMachine.parse("Out for delivery") is OrderStatus.OUT_FOR_DELIVERY

    with pytest.raises(InvalidStatusError, match="Invalid status value"):
        OrderStatusMachine.parse("Bogus")


def test_terminal_statuses() -> None:
    assert OrderStatus.DELIVERED.is_terminal
    assert OrderStatus.CANCELED.is_terminal
    assert not OrderStatus.PLACED.is_terminal
    assert not OrderStatus.OUT_FOR_DELIVERY.is_terminal


@pytest.mark.parametrize("current", list(OrderStatus))
@pytest.mark.parametrize("target", list(OrderStatus))
def test_permissive_mode_accepts_any_known_status(
    current: OrderStatus,
    target: OrderStatus,
) -> None:
    machine = OrderStatusMachine()

    assert machine.transition(current, target) is target


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (OrderStatus.PLACED, OrderStatus.OUT_FOR_DELIVERY),
        (OrderStatus.PLACED, OrderStatus.CANCELED),
        (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
        (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELED),
    ],
)
def test_strict_mode_allows_lifecycle_edges(
    current: OrderStatus,
    target: OrderStatus,
) -> None:
    assert OrderStatusMachine(strict=True).transition(current, target) is target


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (OrderStatus.PLACED, OrderStatus.DELIVERED),
        (OrderStatus.DELIVERED, OrderStatus.PLACED),
        (OrderStatus.CANCELED, OrderStatus.OUT_FOR_DELIVERY),
        (OrderStatus.PLACED, OrderStatus.PLACED),
    ],
)
def test_strict_mode_rejects_other_edges(
    current: OrderStatus,
    target: OrderStatus,
) -> None:
    with pytest.raises(InvalidTransitionError):
        OrderStatusMachine(strict=True).transition(current, target)
