"""Order placement and cancellation.

Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shoplab.db import repo
from shoplab.db.repo import DbSession
from shoplab.db.session import transaction
from shoplab.errors import NotEnoughStockError, NotFoundError, OrderStateError, ValidationError
from shoplab.models.domain import Address, OrderItemEntity

logger = logging.getLogger(__name__)


@dataclass
class OrderInput:
    """Input for order placement."""

    member_id: int
    item_id: int
    count: int


def remaining_stock(stock_quantity: int, count: int) -> int:
    """Stock left after taking ``count`` units.

    Pure function - no database access.

    Raises:
        NotEnoughStockError: If the result would be negative.
    """
    rest = stock_quantity - count
    if rest < 0:
        raise NotEnoughStockError(f"Need {count} but only {stock_quantity} in stock")
    return rest


def place_order(session: DbSession, order_input: OrderInput) -> int:
    """Place a single-item order for a member.

    Creates a READY delivery to the member's address and one order line
    priced at the item's current price, then takes the units from stock.

    Args:
        session: Database session.
        order_input: Member, item and quantity.

    Returns:
        New order ID.

    Raises:
        ValidationError: If count is below 1.
        NotFoundError: If the member or item does not exist.
        NotEnoughStockError: If the item has too little stock.
    """
    if order_input.count < 1:
        raise ValidationError("Order count must be at least 1")

    with transaction(session):
        member = repo.get_member(session, order_input.member_id)
        if member is None:
            raise NotFoundError("Member", order_input.member_id)
        book = repo.get_book(session, order_input.item_id)
        if book is None:
            raise NotFoundError("Item", order_input.item_id)

        rest = remaining_stock(book.stock_quantity, order_input.count)

        delivery_id = repo.create_delivery(session, member.address or Address())
        order_id = repo.create_order(session, member.member_id, delivery_id)
        repo.create_order_item(
            session,
            OrderItemEntity(
                order_item_id=None,
                order_id=order_id,
                item_id=book.item_id,
                order_price=book.price,
                count=order_input.count,
            ),
        )
        repo.set_stock_quantity(session, book.item_id, rest)

    logger.info(f"Placed order {order_id}: member={member.member_id} item={book.item_id}")
    return order_id


def cancel_order(session: DbSession, order_id: int) -> None:
    """Cancel an order and return its units to stock.

    Raises:
        NotFoundError: If the order does not exist.
        OrderStateError: If already shipped or already cancelled.
    """
    with transaction(session):
        order = repo.get_order(session, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        if order.delivery_status == "COMP":
            raise OrderStateError(f"Order {order_id} has already been delivered")
        if order.status == "CANCELLED":
            raise OrderStateError(f"Order {order_id} is already cancelled")

        repo.update_order_status(session, order_id, "CANCELLED")
        for line in repo.get_order_items(session, order_id):
            book = repo.get_book(session, line.item_id)
            if book is not None:
                repo.set_stock_quantity(session, book.item_id, book.stock_quantity + line.count)

    logger.info(f"Cancelled order {order_id}")
