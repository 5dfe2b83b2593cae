"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.

Order graph reads (lazy, join-fetch, paged) materialize each order and
its items into rows while the session is open. The loader options on
each query decide how many round trips that materialization costs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Query, Session, joinedload, selectinload

from shoplab.db.schema import Book, Delivery, Item, Member, Order, OrderItem
from shoplab.models.domain import (
    Address,
    BookEntity,
    MemberEntity,
    OrderEntity,
    OrderItemEntity,
    OrderItemRow,
    OrderRow,
    OrderSearch,
    Page,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _address_of(record: Member | Delivery) -> Address:
    """Extract the embedded address columns."""
    return Address(city=record.city, street=record.street, zipcode=record.zipcode)


def _member_to_entity(member: Member) -> MemberEntity:
    """Convert SQLAlchemy Member to domain entity."""
    return MemberEntity(
        member_id=member.id,
        name=member.name,
        address=_address_of(member),
    )


def _book_to_entity(book: Book) -> BookEntity:
    """Convert SQLAlchemy Book to domain entity."""
    return BookEntity(
        item_id=book.id,
        name=book.name,
        price=book.price,
        stock_quantity=book.stock_quantity,
        author=book.author,
        isbn=book.isbn,
    )


def _order_to_entity(order: Order, delivery: Delivery) -> OrderEntity:
    """Convert SQLAlchemy Order (plus its delivery) to domain entity."""
    return OrderEntity(
        order_id=order.id,
        member_id=order.member_id,
        delivery_id=order.delivery_id,
        order_date=order.order_date,
        status=order.status,
        delivery_status=delivery.status,
    )


def _order_item_to_entity(order_item: OrderItem) -> OrderItemEntity:
    """Convert SQLAlchemy OrderItem to domain entity."""
    return OrderItemEntity(
        order_item_id=order_item.id,
        order_id=order_item.order_id,
        item_id=order_item.item_id,
        order_price=order_item.order_price,
        count=order_item.count,
    )


def _order_graph_to_rows(order: Order) -> tuple[OrderRow, list[OrderItemRow]]:
    """Walk an order graph into rows.

    Touches member, delivery, items and each item's Item. Anything not
    already loaded is fetched lazily here.
    """
    header = _order_header_to_row(order)
    lines = [
        OrderItemRow(
            order_id=order.id,
            item_name=line.item.name,
            order_price=line.order_price,
            count=line.count,
        )
        for line in order.order_items
    ]
    return header, lines


def _order_header_to_row(order: Order) -> OrderRow:
    """Walk only the to-one side of an order graph."""
    return OrderRow(
        order_id=order.id,
        name=order.member.name,
        order_date=order.order_date,
        order_status=order.status,
        address=_address_of(order.delivery),
    )


# ============================================================================
# Member Repository
# ============================================================================


def get_member(session: DbSession, member_id: int) -> MemberEntity | None:
    """Get member by ID."""
    member = session.query(Member).filter(Member.id == member_id).first()
    return _member_to_entity(member) if member else None


def find_members_by_name(session: DbSession, name: str) -> list[MemberEntity]:
    """Get all members with exactly this name."""
    members = session.query(Member).filter(Member.name == name).all()
    return [_member_to_entity(m) for m in members]


def get_all_members(session: DbSession) -> list[MemberEntity]:
    """Get all members in insertion order."""
    members = session.query(Member).order_by(Member.id).all()
    return [_member_to_entity(m) for m in members]


def count_members(session: DbSession) -> int:
    """Count members."""
    return session.query(Member).count()


def create_member(session: DbSession, entity: MemberEntity) -> MemberEntity:
    """Create a new member and assign its ID."""
    address = entity.address or Address()
    member = Member(
        name=entity.name,
        city=address.city,
        street=address.street,
        zipcode=address.zipcode,
    )
    session.add(member)
    session.flush()
    entity.member_id = member.id
    return entity


def update_member_name(session: DbSession, member_id: int, name: str) -> bool:
    """Rename a member. Returns False when the member does not exist."""
    member = session.query(Member).filter(Member.id == member_id).first()
    if member is None:
        return False
    member.name = name
    return True


# ============================================================================
# Item Repository
# ============================================================================


def get_book(session: DbSession, item_id: int) -> BookEntity | None:
    """Get book by ID."""
    book = session.query(Book).filter(Book.id == item_id).first()
    return _book_to_entity(book) if book else None


def create_book(session: DbSession, entity: BookEntity) -> BookEntity:
    """Create a new book and assign its ID."""
    book = Book(
        name=entity.name,
        price=entity.price,
        stock_quantity=entity.stock_quantity,
        author=entity.author,
        isbn=entity.isbn,
    )
    session.add(book)
    session.flush()
    entity.item_id = book.id
    return entity


def set_stock_quantity(session: DbSession, item_id: int, stock_quantity: int) -> None:
    """Overwrite an item's stock quantity."""
    item = session.query(Item).filter(Item.id == item_id).first()
    if item:
        item.stock_quantity = stock_quantity


# ============================================================================
# Order Repository (writes)
# ============================================================================


def create_delivery(session: DbSession, address: Address, status: str = "READY") -> int:
    """Create a delivery and return its ID."""
    delivery = Delivery(
        city=address.city,
        street=address.street,
        zipcode=address.zipcode,
        status=status,
    )
    session.add(delivery)
    session.flush()
    return delivery.id


def create_order(session: DbSession, member_id: int, delivery_id: int) -> int:
    """Create an ORDERED order and return its ID."""
    order = Order(member_id=member_id, delivery_id=delivery_id, status="ORDERED")
    session.add(order)
    session.flush()
    return order.id


def create_order_item(session: DbSession, entity: OrderItemEntity) -> OrderItemEntity:
    """Create an order line and assign its ID."""
    order_item = OrderItem(
        order_id=entity.order_id,
        item_id=entity.item_id,
        order_price=entity.order_price,
        count=entity.count,
    )
    session.add(order_item)
    session.flush()
    entity.order_item_id = order_item.id
    return entity


def get_order(session: DbSession, order_id: int) -> OrderEntity | None:
    """Get order header with its delivery status."""
    result = (
        session.query(Order, Delivery)
        .join(Delivery, Order.delivery_id == Delivery.id)
        .filter(Order.id == order_id)
        .first()
    )
    if result is None:
        return None
    order, delivery = result
    return _order_to_entity(order, delivery)


def get_order_items(session: DbSession, order_id: int) -> list[OrderItemEntity]:
    """Get all lines of an order."""
    lines = (
        session.query(OrderItem)
        .filter(OrderItem.order_id == order_id)
        .order_by(OrderItem.id)
        .all()
    )
    return [_order_item_to_entity(line) for line in lines]


def update_order_status(session: DbSession, order_id: int, status: str) -> None:
    """Update order status."""
    order = session.query(Order).filter(Order.id == order_id).first()
    if order:
        order.status = status


# ============================================================================
# Order Repository (graph reads)
# ============================================================================


def _apply_search(query: Query, search: OrderSearch | None) -> Query:
    """Apply optional status and member-name filters to an Order query."""
    if search is None:
        return query
    if search.order_status is not None:
        query = query.filter(Order.status == search.order_status)
    if search.member_name:
        query = query.filter(Order.member.has(Member.name.contains(search.member_name)))
    return query


def _apply_page(query: Query, page: Page | None) -> Query:
    """Apply an optional offset/limit window."""
    if page is None:
        return query
    return query.offset(page.offset).limit(page.limit)


def find_orders_lazy(
    session: DbSession, search: OrderSearch | None = None
) -> list[tuple[OrderRow, list[OrderItemRow]]]:
    """Load orders with default lazy relationships.

    One query for the orders, then member, delivery, the item list and
    each Item are fetched per order while walking the graph.
    """
    query = _apply_search(session.query(Order), search).order_by(Order.id)
    return [_order_graph_to_rows(order) for order in query.all()]


def find_orders_with_items(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[tuple[OrderRow, list[OrderItemRow]]]:
    """Load orders and all associations in one joined query.

    The ORM de-duplicates the order x item rows by order identity,
    keeping first-seen order. With a page window the limit is applied to
    orders (wrapped in a subquery) rather than to joined rows.
    """
    query = session.query(Order).options(
        joinedload(Order.member),
        joinedload(Order.delivery),
        joinedload(Order.order_items).joinedload(OrderItem.item),
    )
    query = _apply_page(_apply_search(query, search).order_by(Order.id), page)
    return [_order_graph_to_rows(order) for order in query.all()]


def find_orders_with_member_delivery(
    session: DbSession,
    search: OrderSearch | None = None,
    page: Page | None = None,
) -> list[tuple[OrderRow, list[OrderItemRow]]]:
    """Load a page of orders joined with member and delivery.

    Order items (and their Items) come from one batched IN load over the
    page's order IDs, so the page window stays on order rows.
    """
    query = session.query(Order).options(
        joinedload(Order.member),
        joinedload(Order.delivery),
        selectinload(Order.order_items).joinedload(OrderItem.item),
    )
    query = _apply_page(_apply_search(query, search).order_by(Order.id), page)
    return [_order_graph_to_rows(order) for order in query.all()]


def find_order_headers_lazy(
    session: DbSession, search: OrderSearch | None = None
) -> list[OrderRow]:
    """Load orders and resolve member and delivery lazily, per order."""
    query = _apply_search(session.query(Order), search).order_by(Order.id)
    return [_order_header_to_row(order) for order in query.all()]


def find_order_headers_with_member_delivery(
    session: DbSession, search: OrderSearch | None = None
) -> list[OrderRow]:
    """Load orders with member and delivery in one joined query."""
    query = session.query(Order).options(joinedload(Order.member), joinedload(Order.delivery))
    query = _apply_search(query, search).order_by(Order.id)
    return [_order_header_to_row(order) for order in query.all()]
