"""Shared pytest fixtures for shoplab tests."""

from dataclasses import dataclass

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from shoplab.db.schema import Base, Book, Delivery, Member, Order, OrderItem


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


class QueryCounter:
    """Counts SQL statements sent to the database."""

    def __init__(self):
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture
def query_counter(engine):
    """Record every statement executed on the test engine."""
    counter = QueryCounter()
    event.listen(engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine, "before_cursor_execute", counter)


@dataclass
class SampleShop:
    """IDs of the seeded sample shop."""

    member_ids: dict[str, int]
    book_ids: dict[str, int]
    order_ids: list[int]


def seed_sample_shop(session) -> SampleShop:
    """Seed O1:[A, B], O2:[], O3:[C].

    O1 and O2 belong to kim, O3 to lee. Commits and clears the identity
    map so later reads start cold.
    """
    kim = Member(name="kim", city="Seoul", street="Main 1", zipcode="11111")
    lee = Member(name="lee", city="Busan", street="Harbor 2", zipcode="22222")
    book_a = Book(name="A", price=1000, stock_quantity=10, author="Ann", isbn="isbn-a")
    book_b = Book(name="B", price=2000, stock_quantity=10, author="Bob", isbn="isbn-b")
    book_c = Book(name="C", price=3000, stock_quantity=10, author="Cy", isbn="isbn-c")
    session.add_all([kim, lee, book_a, book_b, book_c])
    session.flush()

    orders = []
    for member, status in ((kim, "ORDERED"), (kim, "CANCELLED"), (lee, "ORDERED")):
        delivery = Delivery(city=member.city, street=member.street, zipcode=member.zipcode)
        session.add(delivery)
        session.flush()
        order = Order(member_id=member.id, delivery_id=delivery.id, status=status)
        session.add(order)
        session.flush()
        orders.append(order)

    o1, _o2, o3 = orders
    session.add_all(
        [
            OrderItem(order_id=o1.id, item_id=book_a.id, order_price=1000, count=1),
            OrderItem(order_id=o1.id, item_id=book_b.id, order_price=2000, count=2),
            OrderItem(order_id=o3.id, item_id=book_c.id, order_price=3000, count=3),
        ]
    )
    shop = SampleShop(
        member_ids={"kim": kim.id, "lee": lee.id},
        book_ids={"A": book_a.id, "B": book_b.id, "C": book_c.id},
        order_ids=[o.id for o in orders],
    )
    session.commit()
    session.expunge_all()
    return shop


@pytest.fixture
def sample_shop(session) -> SampleShop:
    """Session seeded with the three-order sample shop."""
    return seed_sample_shop(session)
