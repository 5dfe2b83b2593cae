"""Domain models for shoplab.

Pure Python dataclasses representing domain entities and the flat
query rows the order reader groups. These models are independent of
SQLAlchemy, so nothing lazily loaded ever escapes a session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

# ============================================================================
# Shared
# ============================================================================


@dataclass(frozen=True)
class Address:
    """Postal address embedded in members and deliveries."""

    city: str | None = None
    street: str | None = None
    zipcode: str | None = None


# ============================================================================
# Member Domain
# ============================================================================


@dataclass
class MemberEntity:
    """Domain model for a member."""

    member_id: int | None
    name: str
    address: Address | None = None


# ============================================================================
# Item Domain
# ============================================================================


@dataclass
class BookEntity:
    """Domain model for a book item."""

    item_id: int | None
    name: str
    price: int
    stock_quantity: int
    author: str | None = None
    isbn: str | None = None


# ============================================================================
# Order Domain
# ============================================================================

OrderStatus = Literal["ORDERED", "CANCELLED"]
DeliveryStatus = Literal["READY", "COMP"]


@dataclass
class OrderEntity:
    """Domain model for an order header."""

    order_id: int
    member_id: int
    delivery_id: int
    order_date: datetime
    status: OrderStatus
    delivery_status: DeliveryStatus


@dataclass
class OrderItemEntity:
    """Domain model for an order line."""

    order_item_id: int | None
    order_id: int
    item_id: int
    order_price: int
    count: int


@dataclass
class OrderSearch:
    """Optional filters for order reads."""

    member_name: str | None = None
    order_status: OrderStatus | None = None


@dataclass
class Page:
    """Offset/limit window over orders."""

    offset: int = 0
    limit: int = 100


@dataclass
class OrderRow:
    """One order joined with its member and delivery (no items)."""

    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address


@dataclass
class OrderItemRow:
    """One order item joined with its item."""

    order_id: int
    item_name: str
    order_price: int
    count: int


@dataclass
class OrderFlatRow:
    """Order x item cross-product row.

    Item fields are None for an order without items (outer join).
    """

    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address
    item_name: str | None = None
    order_price: int | None = None
    count: int | None = None
