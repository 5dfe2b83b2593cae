#!/usr/bin/env python3
"""Seed the sample shop database.

Usage:
    python scripts/seed_sample.py [db_path]

This script:
1. Initializes the database schema
2. Registers two members with addresses
3. Adds four books
4. Gives each member one order holding both of their books
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from shoplab.db import repo  # noqa: E402
from shoplab.db.session import get_db_session, init_db, transaction  # noqa: E402
from shoplab.members import service as member_service  # noqa: E402
from shoplab.models.domain import Address, BookEntity, OrderItemEntity  # noqa: E402

logger = logging.getLogger("seed_sample")

# Sample data: (member name, address, [(book name, price, stock), ...])
# The n-th book of a member is ordered n times.
SAMPLE_ORDERS = [
    (
        "userA",
        Address(city="Seoul", street="1", zipcode="1111"),
        [("JPA1 BOOK", 10000, 100), ("JPA2 BOOK", 20000, 100)],
    ),
    (
        "userB",
        Address(city="Busan", street="2", zipcode="2222"),
        [("SPRING1 BOOK", 20000, 200), ("SPRING2 BOOK", 40000, 300)],
    ),
]


def _create_order(session, member_id: int, address: Address, books: list[BookEntity]) -> int:
    """Create one order with a line per book and take its stock."""
    delivery_id = repo.create_delivery(session, address)
    order_id = repo.create_order(session, member_id, delivery_id)
    for count, book in enumerate(books, start=1):
        repo.create_order_item(
            session,
            OrderItemEntity(
                order_item_id=None,
                order_id=order_id,
                item_id=book.item_id,
                order_price=book.price,
                count=count,
            ),
        )
        repo.set_stock_quantity(session, book.item_id, book.stock_quantity - count)
    return order_id


def seed(db_path: Path | None = None) -> list[int]:
    """Insert the sample data.

    Returns:
        IDs of the orders created.
    """
    init_db(db_path)
    order_ids: list[int] = []

    with get_db_session(db_path) as session:
        for name, address, books in SAMPLE_ORDERS:
            member_id = member_service.register(session, name, address)

            with transaction(session):
                entities = [
                    repo.create_book(
                        session,
                        BookEntity(item_id=None, name=title, price=price, stock_quantity=stock),
                    )
                    for title, price, stock in books
                ]
                order_ids.append(_create_order(session, member_id, address, entities))

        logger.info(f"Seeded {repo.count_members(session)} members")

    return order_ids


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    db_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    order_ids = seed(db_path)
    logger.info(f"Seeded {len(order_ids)} orders: {order_ids}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
