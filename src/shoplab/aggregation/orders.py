"""Order aggregation reader.

Builds nested order views (order -> items) from store rows. Each
``read_orders_*`` function is one loading strategy; all of them return
the same views for the same data and differ only in round trips:

- lazy: 1 + several queries per order
- join_fetch: 1 query, de-duplicated by the ORM
- paged: 2 queries (page of orders, then one IN load of their items)
- per_order: 1 + 1 query per order
- batch: 2 queries (orders, then one IN query over their IDs)
- flat: 1 query, grouped here

Output preserves the order in which order IDs first appear in the
underlying result, and item order within an order follows row order.
Grouping and attaching are pure functions - database operations go
through ``repo`` and ``order_query``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shoplab.db import order_query, repo
from shoplab.db.repo import DbSession
from shoplab.models.domain import (
    Address,
    OrderFlatRow,
    OrderItemRow,
    OrderRow,
    OrderSearch,
    Page,
)
from shoplab.models.types import AddressView, OrderItemView, OrderView, SimpleOrderView

logger = logging.getLogger(__name__)


# ============================================================================
# Pure shaping
# ============================================================================


def _address_view(address: Address) -> AddressView:
    return AddressView(city=address.city, street=address.street, zipcode=address.zipcode)


def to_item_view(row: OrderItemRow) -> OrderItemView:
    """Convert one item row to its view."""
    return OrderItemView(
        order_id=row.order_id,
        item_name=row.item_name,
        order_price=row.order_price,
        count=row.count,
    )


def to_order_view(row: OrderRow, items: Iterable[OrderItemView] = ()) -> OrderView:
    """Convert an order row plus its item views to an order view."""
    return OrderView(
        order_id=row.order_id,
        name=row.name,
        order_date=row.order_date,
        order_status=row.order_status,
        address=_address_view(row.address),
        order_items=list(items),
    )


def to_simple_order_view(row: OrderRow) -> SimpleOrderView:
    """Convert an order row to a to-one-only view."""
    return SimpleOrderView(
        order_id=row.order_id,
        name=row.name,
        order_date=row.order_date,
        order_status=row.order_status,
        address=_address_view(row.address),
    )


def group_items_by_order(items: Iterable[OrderItemRow]) -> dict[int, list[OrderItemView]]:
    """Group item rows by their order ID, keeping row order per order."""
    item_map: dict[int, list[OrderItemView]] = {}
    for row in items:
        item_map.setdefault(row.order_id, []).append(to_item_view(row))
    return item_map


def attach_items(
    orders: Iterable[OrderRow], item_map: dict[int, list[OrderItemView]]
) -> list[OrderView]:
    """Attach each order's items from ``item_map``.

    Orders missing from the map get an empty item list.
    """
    return [to_order_view(order, item_map.get(order.order_id, [])) for order in orders]


def group_flat_rows(rows: Iterable[OrderFlatRow]) -> list[OrderView]:
    """Collapse order x item rows into one view per order.

    Order-level fields are taken from the first row seen for each order
    ID. Rows without an item (outer join on an item-less order)
    contribute no item.
    """
    headers: dict[int, OrderRow] = {}
    item_map: dict[int, list[OrderItemView]] = {}

    for row in rows:
        if row.order_id not in headers:
            headers[row.order_id] = OrderRow(
                order_id=row.order_id,
                name=row.name,
                order_date=row.order_date,
                order_status=row.order_status,
                address=row.address,
            )
            item_map[row.order_id] = []
        if row.item_name is not None:
            item_map[row.order_id].append(
                OrderItemView(
                    order_id=row.order_id,
                    item_name=row.item_name,
                    order_price=row.order_price,
                    count=row.count,
                )
            )

    # dicts keep insertion order, which is first-seen order here
    return attach_items(headers.values(), item_map)


def _graph_to_views(graph: list[tuple[OrderRow, list[OrderItemRow]]]) -> list[OrderView]:
    return [to_order_view(order, (to_item_view(item) for item in items)) for order, items in graph]


# ============================================================================
# Strategies
# ============================================================================


def read_orders_lazy(session: DbSession, search: OrderSearch | None = None) -> list[OrderView]:
    """Read orders by walking lazily loaded associations (N+1)."""
    return _graph_to_views(repo.find_orders_lazy(session, search))


def read_orders_join_fetch(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderView]:
    """Read orders with every association joined into one query."""
    return _graph_to_views(repo.find_orders_with_items(session, search, page))


def read_orders_paged(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderView]:
    """Read a page of orders, batch-loading the page's items."""
    if page is None:
        page = Page()
    return _graph_to_views(repo.find_orders_with_member_delivery(session, search, page))


def read_orders_per_order(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderView]:
    """Read order rows, then query items once per order (N+1)."""
    views = []
    for order in order_query.find_orders(session, search, page):
        items = order_query.find_order_items(session, order.order_id)
        views.append(to_order_view(order, map(to_item_view, items)))
    return views


def read_orders_batch(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderView]:
    """Two-phase batch fetch.

    Query orders (joined with member and delivery), then query all their
    items in one IN query, group by order ID and attach. Two queries in
    total; none for the items when no order matches.
    """
    orders = order_query.find_orders(session, search, page)
    order_ids = [order.order_id for order in orders]
    item_map = group_items_by_order(order_query.find_order_items_in(session, order_ids))
    logger.debug(f"Batch-fetched items for {len(order_ids)} orders")
    return attach_items(orders, item_map)


def read_orders_flat(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[OrderView]:
    """Read the flat order x item result and group it in memory."""
    rows = order_query.find_flat(session, search, page)
    views = group_flat_rows(rows)
    logger.debug(f"Grouped {len(rows)} flat rows into {len(views)} orders")
    return views


# ============================================================================
# Simple (to-one only) reads
# ============================================================================


def read_simple_orders_lazy(
    session: DbSession, search: OrderSearch | None = None
) -> list[SimpleOrderView]:
    """Read orders, resolving member and delivery per order (N+1)."""
    return [to_simple_order_view(row) for row in repo.find_order_headers_lazy(session, search)]


def read_simple_orders_join_fetch(
    session: DbSession, search: OrderSearch | None = None
) -> list[SimpleOrderView]:
    """Read orders with member and delivery joined in."""
    rows = repo.find_order_headers_with_member_delivery(session, search)
    return [to_simple_order_view(row) for row in rows]


def read_simple_orders_projection(
    session: DbSession, search: OrderSearch | None = None
) -> list[SimpleOrderView]:
    """Read only the view columns straight from the joined query."""
    return [to_simple_order_view(row) for row in order_query.find_orders(session, search)]
