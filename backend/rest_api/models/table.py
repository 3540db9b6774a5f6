"""
Table Model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntId

if TYPE_CHECKING:
    from .restaurant import Branch


def default_qr_code(branch_id: int, number: int) -> str:
    """QR payload printed on a table: qr-table-{branch_id}-{number}."""
    return f"qr-table-{branch_id}-{number}"


class Table(AuditMixin, Base):
    """
    Physical table in a branch, identified to customers by its QR code.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    branch_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("branch.id"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    qr_code: Mapped[str] = mapped_column(Text, unique=True, nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("branch_id", "number", name="uq_table_branch_number"),
    )

    # Relationships
    branch: Mapped["Branch"] = relationship(back_populates="tables")

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, branch_id={self.branch_id}, number={self.number})>"
