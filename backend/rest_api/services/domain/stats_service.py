"""
Dashboard statistics for branches, restaurants and the platform.
"""

from datetime import datetime, time, timedelta, timezone

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import BRANCH_TIER_ROLES, OrderStatus
from shared.config.settings import settings
from shared.utils.exceptions import NotFoundError
from rest_api.models import Branch, Order, OrderItem, Restaurant, Table, User
from rest_api.services.permissions import Identity, PermissionContext


def start_of_day(now: datetime | None = None) -> datetime:
    """Midnight UTC of the given (or current) day."""
    now = now or datetime.now(timezone.utc)
    return datetime.combine(now.date(), time.min, tzinfo=timezone.utc)


def _recent(query: Select, limit: int) -> Select:
    return (
        query.options(
            selectinload(Order.items).selectinload(OrderItem.menu_item),
            selectinload(Order.table),
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    )


class StatsService:
    """Read-only counters behind the admin dashboards."""

    def __init__(self, db: Session):
        self._db = db

    def _count(self, query: Select) -> int:
        return self._db.scalar(select(func.count()).select_from(query.subquery())) or 0

    def _branch_for(self, branch_id: int, identity: Identity) -> Branch:
        branch = self._db.get(Branch, branch_id)
        PermissionContext(identity).require_branch_access(
            branch_id, branch.restaurant_id if branch else None
        )
        if branch is None:
            raise NotFoundError("Branch", branch_id)
        return branch

    def branch_stats(self, branch_id: int, identity: Identity) -> dict:
        """Active tables, all orders, active branch staff, latest orders."""
        branch = self._branch_for(branch_id, identity)

        orders = select(Order).where(Order.branch_id == branch.id)
        return {
            "total_tables": self._count(
                select(Table.id).where(Table.branch_id == branch.id, Table.is_active.is_(True))
            ),
            "total_orders": self._count(orders),
            "total_staff": self._count(
                select(User.id).where(
                    User.branch_id == branch.id,
                    User.is_active.is_(True),
                    User.role.in_([role.value for role in BRANCH_TIER_ROLES]),
                )
            ),
            "recent_orders": list(
                self._db.scalars(_recent(orders, settings.recent_orders_limit)).all()
            ),
        }

    def staff_stats(self, branch_id: int, identity: Identity, now: datetime | None = None) -> dict:
        """Today's order queue of a branch, by status."""
        branch = self._branch_for(branch_id, identity)

        today = start_of_day(now)
        tomorrow = today + timedelta(days=1)
        todays = select(Order).where(
            Order.branch_id == branch.id,
            Order.created_at >= today,
            Order.created_at < tomorrow,
        )

        def with_status(status: OrderStatus) -> int:
            return self._count(todays.where(Order.status == status.value))

        return {
            "pending_orders": with_status(OrderStatus.PENDING),
            "preparing_orders": with_status(OrderStatus.PREPARING),
            "ready_orders": with_status(OrderStatus.READY),
            "total_orders": self._count(todays),
            "recent_orders": list(
                self._db.scalars(_recent(todays, settings.staff_recent_orders_limit)).all()
            ),
        }

    def restaurant_stats(self, restaurant_id: int, identity: Identity) -> dict:
        """Active branches, orders and staff of one restaurant."""
        PermissionContext(identity).require_restaurant_access(restaurant_id)
        if self._db.get(Restaurant, restaurant_id) is None:
            raise NotFoundError("Restaurant", restaurant_id)

        branch_ids = select(Branch.id).where(Branch.restaurant_id == restaurant_id)
        orders = select(Order).where(Order.branch_id.in_(branch_ids))
        return {
            "total_branches": self._count(
                select(Branch.id).where(
                    Branch.restaurant_id == restaurant_id, Branch.is_active.is_(True)
                )
            ),
            "total_orders": self._count(orders),
            "total_users": self._count(
                select(User.id).where(
                    (User.restaurant_id == restaurant_id) | User.branch_id.in_(branch_ids)
                )
            ),
            "recent_orders": list(
                self._db.scalars(_recent(orders, settings.recent_orders_limit)).all()
            ),
        }

    def platform_stats(self) -> dict:
        """Platform-wide totals for the super administrator."""
        return {
            "total_restaurants": self._count(
                select(Restaurant.id).where(Restaurant.is_active.is_(True))
            ),
            "total_branches": self._count(select(Branch.id).where(Branch.is_active.is_(True))),
            "total_users": self._count(select(User.id).where(User.is_active.is_(True))),
            "total_orders": self._count(select(Order.id)),
            "recent_orders": list(
                self._db.scalars(_recent(select(Order), settings.recent_orders_limit)).all()
            ),
        }
