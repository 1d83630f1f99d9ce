"""Orders: placement from the cart, history and lifecycle status."""

from .routes import configure_order_router
from .status import (
    ALLOWED_TRANSITIONS,
    InvalidStatusError,
    InvalidTransitionError,
    OrderStatus,
    OrderStatusMachine,
)
from .workflow import OrderWorkflow

__all__ = [
    "ALLOWED_TRANSITIONS",
    "InvalidStatusError",
    "InvalidTransitionError",
    "OrderStatus",
    "OrderStatusMachine",
    "OrderWorkflow",
    "configure_order_router",
]
