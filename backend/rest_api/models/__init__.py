"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and AuditMixin
- restaurant: Restaurant, Branch
- user: User
- catalog: Category, MenuItem, Menu, MenuMenuItem, BranchMenu
- table: Table
- order: Order, OrderItem, OrderStatusChange
"""

# Base classes
from .base import Base, AuditMixin

# Tenancy
from .restaurant import Restaurant, Branch

# Staff
from .user import User

# Catalog (menu structure)
from .catalog import Category, MenuItem, Menu, MenuMenuItem, BranchMenu

# Tables
from .table import Table, default_qr_code

# Orders
from .order import Order, OrderItem, OrderStatusChange

__all__ = [
    "Base",
    "AuditMixin",
    "Restaurant",
    "Branch",
    "User",
    "Category",
    "MenuItem",
    "Menu",
    "MenuMenuItem",
    "BranchMenu",
    "Table",
    "default_qr_code",
    "Order",
    "OrderItem",
    "OrderStatusChange",
]
