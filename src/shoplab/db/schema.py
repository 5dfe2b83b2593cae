"""Database schema for shoplab.

Members, deliveries, items and orders. Every cross-entity reference is
an explicit non-null foreign key so an order always resolves to exactly
one member and one delivery.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Member(Base):
    """Shop member.

    No UNIQUE constraint on name: duplicate names are rejected by the
    member service with a best-effort scan, not by the store.
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    street: Mapped[str | None] = mapped_column(String(128), nullable=True)
    zipcode: Mapped[str | None] = mapped_column(String(16), nullable=True)

    orders: Mapped[list[Order]] = relationship(back_populates="member")


class Delivery(Base):
    """Shipping record, one per order."""

    __tablename__ = "deliveries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    street: Mapped[str | None] = mapped_column(String(128), nullable=True)
    zipcode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="READY")


class Item(Base):
    """Sellable item.

    Single-table inheritance on ``dtype``; only Book is populated.
    """

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dtype: Mapped[str] = mapped_column(String(8), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __mapper_args__ = {
        "polymorphic_on": "dtype",
        "polymorphic_identity": "I",
    }


class Book(Item):
    """Book item (discriminator ``B``)."""

    author: Mapped[str | None] = mapped_column(String(64), nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __mapper_args__ = {"polymorphic_identity": "B"}


class Order(Base):
    """Customer order.

    Relationships load lazily by default; read paths choose their own
    loading strategy explicitly.
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(Integer, ForeignKey("members.id"), nullable=False)
    delivery_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("deliveries.id"), nullable=False, unique=True
    )
    order_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ORDERED")

    member: Mapped[Member] = relationship(back_populates="orders")
    delivery: Mapped[Delivery] = relationship()
    order_items: Mapped[list[OrderItem]] = relationship(
        back_populates="order", order_by="OrderItem.id"
    )


class OrderItem(Base):
    """Line item of an order (price captured at order time)."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.id"), nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, ForeignKey("items.id"), nullable=False)
    order_price: Mapped[int] = mapped_column(Integer, nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped[Order] = relationship(back_populates="order_items")
    item: Mapped[Item] = relationship()
