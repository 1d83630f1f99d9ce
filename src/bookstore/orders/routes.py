"""Order routes: placing orders, order history and status updates."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from bookstore.auth import Validate
from bookstore.common import Role
from bookstore.store import Document

from .models import (
    AllOrdersResponse,
    OrderHistoryEntry,
    OrderHistoryResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PopulatedOrder,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from .workflow import OrderWorkflow

LOGGER = logging.getLogger(__name__)


def configure_order_router(
    router: APIRouter,
    workflow: OrderWorkflow,
    validate: Validate,
) -> APIRouter:
    """Configure the order router.

    :param router: The APIRouter to configure
    :param workflow: The OrderWorkflow carrying out order operations
    :param validate: The Validate instance for authentication and authorization
    :return: The configured APIRouter
    """
    require_admin = validate.role(Role.ADMIN)

    @router.post("/place-order", response_model=PlaceOrderResponse)
    async def place_order(
        request: PlaceOrderRequest,
        user: Annotated[Document, Depends(validate.identity)],
    ) -> PlaceOrderResponse:
        order_ids = await workflow.place_order(
            user["_id"],
            [item.book_id for item in request.order],
        )
        return PlaceOrderResponse(orders=order_ids)

    @router.get("/get-order-history", response_model=OrderHistoryResponse)
    async def get_order_history(
        user: Annotated[Document, Depends(validate.identity)],
    ) -> OrderHistoryResponse:
        history = await workflow.order_history(user["_id"])
        return OrderHistoryResponse(
            data=[OrderHistoryEntry.model_validate(entry) for entry in history],
        )

    @router.get("/get-all-orders", response_model=AllOrdersResponse)
    async def get_all_orders(
        _admin: Annotated[Document, Depends(require_admin)],
    ) -> AllOrdersResponse:
        orders = await workflow.all_orders()
        return AllOrdersResponse(
            data=[PopulatedOrder.model_validate(order) for order in orders],
        )

    @router.put("/update-status/{order_id}", response_model=StatusUpdateResponse)
    async def update_status(
        order_id: str,
        request: StatusUpdateRequest,
        admin: Annotated[Document, Depends(require_admin)],
    ) -> StatusUpdateResponse:
        new_status = await workflow.update_status(order_id, request.status)
        LOGGER.debug("Order %s updated by %s", order_id, admin["username"])
        return StatusUpdateResponse(updated_status=new_status, order_id=order_id)

    return router
