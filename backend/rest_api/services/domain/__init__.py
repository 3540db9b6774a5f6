"""
Domain Services - application layer.

Routers stay thin: they resolve the identity, call a service and shape
the response. Services hold the business rules and the scope checks.

Usage:
    from rest_api.services.domain import OrderService

    service = OrderService(db)
    order = service.transition(order_id, OrderStatus.CONFIRMED, identity)
"""

from .order_service import (
    OrderService,
    OrderTotals,
    compute_totals,
    generate_order_number,
    is_legal_transition,
)
from .stats_service import StatsService
from .menu_service import MenuService
from .table_service import TableService
from .branch_service import BranchService
from .user_service import UserService

__all__ = [
    "OrderService",
    "OrderTotals",
    "compute_totals",
    "generate_order_number",
    "is_legal_transition",
    "StatsService",
    "MenuService",
    "TableService",
    "BranchService",
    "UserService",
]
