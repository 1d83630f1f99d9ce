"""Models for order requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from bookstore.auth.models import UserProfile
from bookstore.catalog import Book

from .status import OrderStatus


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book_id: str = Field(alias="_id", min_length=1)


class PlaceOrderRequest(BaseModel):
    order: list[OrderItem] = Field(min_length=1)


class PlaceOrderResponse(BaseModel):
    status: str = "Success"
    message: str = "Order Placed Successfully"
    orders: list[str]


class OrderHistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    book: Book
    status: OrderStatus
    created_at: str | None = Field(default=None, alias="createdAt")


class OrderHistoryResponse(BaseModel):
    status: str = "Success"
    data: list[OrderHistoryEntry]


class PopulatedOrder(OrderHistoryEntry):
    """An order as seen by admins, with the ordering account attached."""

    user: UserProfile


class AllOrdersResponse(BaseModel):
    status: str = "Success"
    data: list[PopulatedOrder]


class StatusUpdateRequest(BaseModel):
    """Requested status; checked against :class:`OrderStatus` by the workflow."""

    status: str


class StatusUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Order status updated successfully"
    updated_status: OrderStatus = Field(serialization_alias="updatedStatus")
    order_id: str = Field(serialization_alias="orderId")
