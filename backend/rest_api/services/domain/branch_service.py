"""
Branch and Restaurant Domain Service.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import BRANCH_TIER_ROLES
from shared.utils.exceptions import NotFoundError
from rest_api.models import Branch, Order, Restaurant, Table, User
from rest_api.services.permissions import Identity, PermissionContext


class BranchService:
    """Read side of the tenancy hierarchy."""

    def __init__(self, db: Session):
        self._db = db

    def list_active_branches(self, restaurant_id: int | None = None) -> list[dict]:
        """Public listing of active branches with table and order counts."""
        table_count = (
            select(func.count(Table.id))
            .where(Table.branch_id == Branch.id)
            .correlate(Branch)
            .scalar_subquery()
        )
        order_count = (
            select(func.count(Order.id))
            .where(Order.branch_id == Branch.id)
            .correlate(Branch)
            .scalar_subquery()
        )
        query = (
            select(Branch, table_count, order_count)
            .options(selectinload(Branch.restaurant))
            .where(Branch.is_active.is_(True))
            .order_by(Branch.name, Branch.id)
        )
        if restaurant_id is not None:
            query = query.where(Branch.restaurant_id == restaurant_id)

        return [
            {
                "id": branch.id,
                "restaurant_id": branch.restaurant_id,
                "name": branch.name,
                "address": branch.address,
                "phone": branch.phone,
                "email": branch.email,
                "is_active": branch.is_active,
                "restaurant": branch.restaurant,
                "table_count": tables,
                "order_count": orders,
            }
            for branch, tables, orders in self._db.execute(query).all()
        ]

    def get_branch(self, branch_id: int, identity: Identity) -> dict:
        """Branch with its tables, for staff who can reach it."""
        branch = self._db.scalar(
            select(Branch)
            .options(selectinload(Branch.tables), selectinload(Branch.restaurant))
            .where(Branch.id == branch_id)
        )
        PermissionContext(identity).require_branch_access(
            branch_id, branch.restaurant_id if branch else None
        )
        if branch is None:
            raise NotFoundError("Branch", branch_id)

        order_count = self._db.scalar(
            select(func.count(Order.id)).where(Order.branch_id == branch.id)
        )
        staff_count = self._db.scalar(
            select(func.count(User.id)).where(
                User.branch_id == branch.id,
                User.role.in_([role.value for role in BRANCH_TIER_ROLES]),
            )
        )
        return {
            "id": branch.id,
            "restaurant_id": branch.restaurant_id,
            "name": branch.name,
            "address": branch.address,
            "phone": branch.phone,
            "email": branch.email,
            "is_active": branch.is_active,
            "restaurant": branch.restaurant,
            "tables": branch.tables,
            "order_count": order_count or 0,
            "staff_count": staff_count or 0,
        }

    def get_restaurant(self, restaurant_id: int, identity: Identity) -> Restaurant:
        """Restaurant with its branches; the scope check comes first."""
        restaurant = self._db.scalar(
            select(Restaurant)
            .options(selectinload(Restaurant.branches))
            .where(Restaurant.id == restaurant_id)
        )
        PermissionContext(identity).require_restaurant_access(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)
        return restaurant
