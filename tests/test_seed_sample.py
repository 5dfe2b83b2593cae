"""Tests for the sample data seeding script."""

import importlib.util
from pathlib import Path

import pytest

from shoplab.db import repo
from shoplab.db.session import get_db_session

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def seed_module():
    """Load scripts/seed_sample.py as a module."""
    script_path = PROJECT_ROOT / "scripts" / "seed_sample.py"
    spec = importlib.util.spec_from_file_location("seed_sample", script_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSeed:
    """Seeded sample shop."""

    def test_members_and_orders(self, seed_module, tmp_path):
        path = tmp_path / "shop.db"

        order_ids = seed_module.seed(path)

        assert len(order_ids) == 2
        with get_db_session(path) as session:
            assert repo.count_members(session) == 2

    def test_orders_hold_several_items(self, seed_module, tmp_path):
        """Each seeded order has one line per book, the n-th ordered n times."""
        path = tmp_path / "shop.db"

        order_ids = seed_module.seed(path)

        with get_db_session(path) as session:
            for order_id in order_ids:
                lines = repo.get_order_items(session, order_id)
                assert [line.count for line in lines] == [1, 2]

    def test_stock_taken_and_price_snapshotted(self, seed_module, tmp_path):
        path = tmp_path / "shop.db"

        order_ids = seed_module.seed(path)

        with get_db_session(path) as session:
            lines = repo.get_order_items(session, order_ids[0])
            books = [repo.get_book(session, line.item_id) for line in lines]

        assert [line.order_price for line in lines] == [10000, 20000]
        assert [book.stock_quantity for book in books] == [99, 98]
