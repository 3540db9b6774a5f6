"""
Order Models: Order, OrderItem, OrderStatusChange.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus, PaymentStatus

from .base import AuditMixin, Base, BigIntId, utcnow

if TYPE_CHECKING:
    from .restaurant import Branch
    from .table import Table
    from .catalog import MenuItem


class Order(AuditMixin, Base):
    """
    A customer order placed at a branch.

    Orders are never deleted. `version` is SQLAlchemy's version counter:
    every UPDATE checks it, so a concurrent stale write raises StaleDataError.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    order_number: Mapped[str] = mapped_column(Text, unique=True, nullable=False, index=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)  # DINE_IN, TAKEAWAY, DELIVERY
    status: Mapped[str] = mapped_column(
        Text, default=OrderStatus.PENDING.value, nullable=False, index=True
    )
    payment_status: Mapped[str] = mapped_column(
        Text, default=PaymentStatus.PENDING.value, nullable=False
    )

    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    delivery_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    branch_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("branch.id"), nullable=False, index=True
    )
    table_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=True, index=True
    )

    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[str] = mapped_column(Text, nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(Text)
    delivery_address: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("total >= 0", name="chk_order_total_non_negative"),
        Index("ix_order_branch_created", "branch_id", "created_at"),
        Index("ix_order_branch_status", "branch_id", "status"),
    )

    # Relationships
    branch: Mapped["Branch"] = relationship(back_populates="orders")
    table: Mapped[Optional["Table"]] = relationship()
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )
    status_changes: Mapped[list["OrderStatusChange"]] = relationship(
        back_populates="order", order_by="OrderStatusChange.id"
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    """Line of an order; price is the item's price at order time."""

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_quantity_positive"),
        CheckConstraint("price >= 0", name="chk_order_item_price_non_negative"),
    )

    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped["MenuItem"] = relationship()


class OrderStatusChange(Base):
    """Audit trail row written for every applied status transition."""

    __tablename__ = "order_status_change"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    from_status: Mapped[str] = mapped_column(Text, nullable=False)
    to_status: Mapped[str] = mapped_column(Text, nullable=False)
    # No FK: the audit row outlives the staff account
    changed_by_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    changed_by_role: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    order: Mapped["Order"] = relationship(back_populates="status_changes")
