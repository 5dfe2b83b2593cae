"""Projection queries for order reads.

Selects only the columns an order view needs, straight into rows,
without loading ORM entities. Kept apart from ``repo`` so that
view-shaped queries are not reused as general-purpose entity access.

Note on ``find_order_items_in``: some backends cap the number of bound
parameters per statement, and very large ID sets may then be split into
several round trips by the driver or dialect. That is a platform limit,
not something this module works around.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Query

from shoplab.db.repo import DbSession
from shoplab.db.schema import Delivery, Item, Member, Order, OrderItem
from shoplab.models.domain import (
    Address,
    OrderFlatRow,
    OrderItemRow,
    OrderRow,
    OrderSearch,
    Page,
)


def _order_columns(session: DbSession) -> Query:
    """Order joined with member and delivery, one row per order."""
    return (
        session.query(
            Order.id,
            Member.name,
            Order.order_date,
            Order.status,
            Delivery.city,
            Delivery.street,
            Delivery.zipcode,
        )
        .join(Member, Order.member_id == Member.id)
        .join(Delivery, Order.delivery_id == Delivery.id)
    )


def _filter(query: Query, search: OrderSearch | None) -> Query:
    """Apply optional filters to a query that already joins Member."""
    if search is None:
        return query
    if search.order_status is not None:
        query = query.filter(Order.status == search.order_status)
    if search.member_name:
        query = query.filter(Member.name.contains(search.member_name))
    return query


def find_orders(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderRow]:
    """Fetch matching orders joined with member and delivery."""
    query = _filter(_order_columns(session), search).order_by(Order.id)
    if page is not None:
        query = query.offset(page.offset).limit(page.limit)
    return [
        OrderRow(
            order_id=order_id,
            name=name,
            order_date=order_date,
            order_status=status,
            address=Address(city=city, street=street, zipcode=zipcode),
        )
        for order_id, name, order_date, status, city, street, zipcode in query.all()
    ]


def _item_columns(session: DbSession) -> Query:
    """Order item joined with its item."""
    return session.query(
        OrderItem.order_id,
        Item.name,
        OrderItem.order_price,
        OrderItem.count,
    ).join(Item, OrderItem.item_id == Item.id)


def _to_item_rows(results: list) -> list[OrderItemRow]:
    return [
        OrderItemRow(order_id=order_id, item_name=name, order_price=price, count=count)
        for order_id, name, price, count in results
    ]


def find_order_items(session: DbSession, order_id: int) -> list[OrderItemRow]:
    """Fetch the items of one order."""
    query = _item_columns(session).filter(OrderItem.order_id == order_id)
    return _to_item_rows(query.order_by(OrderItem.id).all())


def find_order_items_in(session: DbSession, order_ids: Sequence[int]) -> list[OrderItemRow]:
    """Fetch the items of every order in ``order_ids`` with one query."""
    if not order_ids:
        return []
    query = _item_columns(session).filter(OrderItem.order_id.in_(list(order_ids)))
    return _to_item_rows(query.order_by(OrderItem.id).all())


def find_flat(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderFlatRow]:
    """Fetch the order x item cross product in one query.

    Items are outer joined, so an order without items still yields one
    row with empty item columns. A page window selects orders through an
    ID subquery so it never cuts an order's rows in half.
    """
    query = (
        session.query(
            Order.id,
            Member.name,
            Order.order_date,
            Order.status,
            Delivery.city,
            Delivery.street,
            Delivery.zipcode,
            Item.name,
            OrderItem.order_price,
            OrderItem.count,
        )
        .join(Member, Order.member_id == Member.id)
        .join(Delivery, Order.delivery_id == Delivery.id)
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .outerjoin(Item, OrderItem.item_id == Item.id)
    )
    query = _filter(query, search)
    if page is not None:
        page_ids = (
            _filter(session.query(Order.id).join(Member, Order.member_id == Member.id), search)
            .order_by(Order.id)
            .offset(page.offset)
            .limit(page.limit)
            .subquery()
        )
        query = query.filter(Order.id.in_(select(page_ids.c.id)))

    rows = []
    for (
        order_id,
        name,
        order_date,
        status,
        city,
        street,
        zipcode,
        item_name,
        order_price,
        count,
    ) in query.order_by(Order.id, OrderItem.id).all():
        rows.append(
            OrderFlatRow(
                order_id=order_id,
                name=name,
                order_date=order_date,
                order_status=status,
                address=Address(city=city, street=street, zipcode=zipcode),
                item_name=item_name,
                order_price=order_price,
                count=count,
            )
        )
    return rows
