"""
Catalog Models: Category, MenuItem, Menu and its link tables.

A branch's public menu is the set of available items of the active
menus linked to it through BranchMenu.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntId

if TYPE_CHECKING:
    from .restaurant import Restaurant, Branch


class Category(AuditMixin, Base):
    """Menu section of a restaurant ("Starters", "Mains", ...)."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_category_restaurant_name"),
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="categories")
    items: Mapped[list["MenuItem"]] = relationship(
        back_populates="category", order_by="MenuItem.sort_order"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class MenuItem(AuditMixin, Base):
    """A dish or drink that can be ordered."""

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text)
    vegetarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    category: Mapped["Category"] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"


class Menu(AuditMixin, Base):
    """Named selection of a restaurant's items ("Lunch", "Weekend")."""

    __tablename__ = "menu"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="menus")
    menu_items: Mapped[list["MenuMenuItem"]] = relationship(back_populates="menu")
    branch_menus: Mapped[list["BranchMenu"]] = relationship(back_populates="menu")


class MenuMenuItem(Base):
    """Item membership in a menu."""

    __tablename__ = "menu_menu_item"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    menu_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu.id"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu_item.id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("menu_id", "menu_item_id", name="uq_menu_menu_item"),
    )

    menu: Mapped["Menu"] = relationship(back_populates="menu_items")
    menu_item: Mapped["MenuItem"] = relationship()


class BranchMenu(AuditMixin, Base):
    """Menu published at a branch."""

    __tablename__ = "branch_menu"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    branch_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("branch.id"), nullable=False, index=True
    )
    menu_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu.id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("branch_id", "menu_id", name="uq_branch_menu"),
    )

    branch: Mapped["Branch"] = relationship(back_populates="branch_menus")
    menu: Mapped["Menu"] = relationship(back_populates="branch_menus")
