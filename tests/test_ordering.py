"""Tests for order placement and cancellation."""

import pytest

from shoplab.aggregation import orders as reader
from shoplab.db import repo
from shoplab.db.schema import Delivery
from shoplab.errors import NotEnoughStockError, NotFoundError, OrderStateError, ValidationError
from shoplab.members import service as member_service
from shoplab.models.domain import Address, BookEntity
from shoplab.ordering import service
from shoplab.ordering.service import OrderInput, remaining_stock


@pytest.fixture
def member_and_book(session) -> tuple[int, int]:
    """A member with an address and a book with 10 in stock."""
    member_id = member_service.register(
        session, "kim", Address(city="Seoul", street="Main 1", zipcode="11111")
    )
    book = repo.create_book(
        session,
        BookEntity(item_id=None, name="JPA BOOK", price=10000, stock_quantity=10, author="kim"),
    )
    session.commit()
    return member_id, book.item_id


class TestRemainingStock:
    """Pure stock arithmetic."""

    def test_takes_units(self):
        assert remaining_stock(10, 3) == 7

    def test_can_empty_stock(self):
        assert remaining_stock(2, 2) == 0

    def test_rejects_overdraw(self):
        with pytest.raises(NotEnoughStockError):
            remaining_stock(2, 3)


class TestPlaceOrder:
    """Order placement."""

    def test_creates_order_with_item(self, session, member_and_book):
        """Placed order shows up in reads with price and count."""
        member_id, book_id = member_and_book

        order_id = service.place_order(session, OrderInput(member_id, book_id, 2))

        views = reader.read_orders_batch(session)
        assert [v.order_id for v in views] == [order_id]
        assert views[0].order_status == "ORDERED"
        assert views[0].name == "kim"
        assert views[0].address.city == "Seoul"
        assert views[0].order_items[0].item_name == "JPA BOOK"
        assert views[0].order_items[0].order_price == 10000
        assert views[0].order_items[0].count == 2

    def test_decrements_stock(self, session, member_and_book):
        """Stock drops by the ordered count."""
        member_id, book_id = member_and_book

        service.place_order(session, OrderInput(member_id, book_id, 3))

        assert repo.get_book(session, book_id).stock_quantity == 7

    def test_delivery_is_ready(self, session, member_and_book):
        """A new order ships to a READY delivery."""
        member_id, book_id = member_and_book

        order_id = service.place_order(session, OrderInput(member_id, book_id, 1))

        assert repo.get_order(session, order_id).delivery_status == "READY"

    def test_not_enough_stock(self, session, member_and_book):
        """Overdrawing stock fails and leaves no order behind."""
        member_id, book_id = member_and_book

        with pytest.raises(NotEnoughStockError):
            service.place_order(session, OrderInput(member_id, book_id, 11))

        assert reader.read_orders_batch(session) == []
        assert repo.get_book(session, book_id).stock_quantity == 10

    def test_unknown_member(self, session, member_and_book):
        _, book_id = member_and_book

        with pytest.raises(NotFoundError):
            service.place_order(session, OrderInput(999, book_id, 1))

    def test_unknown_item(self, session, member_and_book):
        member_id, _ = member_and_book

        with pytest.raises(NotFoundError):
            service.place_order(session, OrderInput(member_id, 999, 1))

    def test_zero_count(self, session, member_and_book):
        member_id, book_id = member_and_book

        with pytest.raises(ValidationError):
            service.place_order(session, OrderInput(member_id, book_id, 0))


class TestCancelOrder:
    """Order cancellation."""

    def test_cancel_restores_stock(self, session, member_and_book):
        """Cancelling flips status and puts units back."""
        member_id, book_id = member_and_book
        order_id = service.place_order(session, OrderInput(member_id, book_id, 4))

        service.cancel_order(session, order_id)

        assert repo.get_order(session, order_id).status == "CANCELLED"
        assert repo.get_book(session, book_id).stock_quantity == 10

    def test_cancel_twice(self, session, member_and_book):
        """A cancelled order cannot be cancelled again."""
        member_id, book_id = member_and_book
        order_id = service.place_order(session, OrderInput(member_id, book_id, 1))
        service.cancel_order(session, order_id)

        with pytest.raises(OrderStateError):
            service.cancel_order(session, order_id)

        assert repo.get_book(session, book_id).stock_quantity == 10

    def test_cancel_delivered(self, session, member_and_book):
        """Delivered orders stay ordered."""
        member_id, book_id = member_and_book
        order_id = service.place_order(session, OrderInput(member_id, book_id, 1))
        order = repo.get_order(session, order_id)
        session.get(Delivery, order.delivery_id).status = "COMP"
        session.commit()

        with pytest.raises(OrderStateError):
            service.cancel_order(session, order_id)

        assert repo.get_order(session, order_id).status == "ORDERED"

    def test_cancel_unknown(self, session):
        with pytest.raises(NotFoundError):
            service.cancel_order(session, 999)
