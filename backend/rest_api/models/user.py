"""
Staff User Model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntId

if TYPE_CHECKING:
    from .restaurant import Restaurant, Branch


class User(AuditMixin, Base):
    """
    A staff member with exactly one role.

    Restaurant-tier roles carry restaurant_id, branch-tier roles carry
    branch_id (and the branch's restaurant_id), SUPER_ADMIN carries neither.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # bcrypt hash
    name: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    role: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    restaurant_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=True, index=True
    )
    branch_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("branch.id"), nullable=True, index=True
    )

    # Relationships
    restaurant: Mapped[Optional["Restaurant"]] = relationship(
        back_populates="users", foreign_keys=[restaurant_id]
    )
    branch: Mapped[Optional["Branch"]] = relationship(
        back_populates="staff", foreign_keys=[branch_id]
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
