"""Pydantic models for the shoplab API.

Request bodies and read-models. ORM entities are never returned
directly; every response is built from these.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AddressView(BaseModel):
    """Postal address for API responses."""

    city: str | None
    street: str | None
    zipcode: str | None


# ============================================================================
# Members
# ============================================================================


class CreateMemberRequest(BaseModel):
    """Member registration body."""

    name: str = Field(min_length=1)


class CreateMemberResponse(BaseModel):
    """Response for member registration."""

    id: int


class UpdateMemberRequest(BaseModel):
    """Member rename body."""

    name: str = Field(min_length=1)


class UpdateMemberResponse(BaseModel):
    """Response for member rename."""

    id: int
    name: str


class MemberSummary(BaseModel):
    """Member as listed by GET /members."""

    name: str


class MemberListResponse(BaseModel):
    """Member list envelope."""

    model_config = ConfigDict(populate_by_name=True)

    response_info: str = Field(alias="responseInfo")
    count: int
    data: list[MemberSummary]


# ============================================================================
# Orders
# ============================================================================


class OrderItemView(BaseModel):
    """One line item of an order view."""

    order_id: int
    item_name: str
    order_price: int
    count: int


class OrderView(BaseModel):
    """Order with its member name, delivery address and line items."""

    order_id: int
    name: str
    order_date: datetime
    order_status: Literal["ORDERED", "CANCELLED"]
    address: AddressView
    order_items: list[OrderItemView] = Field(default_factory=list)


class SimpleOrderView(BaseModel):
    """Order with to-one associations only."""

    order_id: int
    name: str
    order_date: datetime
    order_status: Literal["ORDERED", "CANCELLED"]
    address: AddressView


class OrderListResponse(BaseModel):
    """Envelope for order reads."""

    data: list[OrderView]


class SimpleOrderListResponse(BaseModel):
    """Envelope for simple order reads."""

    data: list[SimpleOrderView]


class PlaceOrderRequest(BaseModel):
    """Order placement body."""

    member_id: int
    item_id: int
    count: int


class PlaceOrderResponse(BaseModel):
    """Response for order placement."""

    id: int


class CancelOrderResponse(BaseModel):
    """Response for order cancellation."""

    id: int
    order_status: Literal["ORDERED", "CANCELLED"]
