"""
Multi-Tenancy Models: Restaurant and Branch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntId

if TYPE_CHECKING:
    from .user import User
    from .catalog import Category, Menu, BranchMenu
    from .table import Table
    from .order import Order


class Restaurant(AuditMixin, Base):
    """
    A restaurant brand, the top-level tenant.
    Branches, categories, menus and restaurant-tier staff belong to one restaurant.
    """

    __tablename__ = "restaurant"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(Text)
    logo: Mapped[Optional[str]] = mapped_column(Text)
    # No FK to app_user: app_user already points here
    owner_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)

    # Relationships
    branches: Mapped[list["Branch"]] = relationship(back_populates="restaurant")
    users: Mapped[list["User"]] = relationship(
        back_populates="restaurant", foreign_keys="User.restaurant_id"
    )
    categories: Mapped[list["Category"]] = relationship(back_populates="restaurant")
    menus: Mapped[list["Menu"]] = relationship(back_populates="restaurant")

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}')>"


class Branch(AuditMixin, Base):
    """
    A physical location of a restaurant.
    Tables, orders and branch-tier staff belong to exactly one branch.
    """

    __tablename__ = "branch"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="branches")
    tables: Mapped[list["Table"]] = relationship(
        back_populates="branch", order_by="Table.number"
    )
    orders: Mapped[list["Order"]] = relationship(back_populates="branch")
    staff: Mapped[list["User"]] = relationship(
        back_populates="branch", foreign_keys="User.branch_id"
    )
    branch_menus: Mapped[list["BranchMenu"]] = relationship(back_populates="branch")

    def __repr__(self) -> str:
        return f"<Branch(id={self.id}, restaurant_id={self.restaurant_id}, name='{self.name}')>"
