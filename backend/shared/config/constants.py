"""
Centralized constants for the backend application.

Usage:
    from shared.config.constants import Role, OrderStatus, ORDER_TRANSITIONS

    if identity.role in BRANCH_TIER_ROLES:
        ...

    if OrderStatus.CONFIRMED in ORDER_TRANSITIONS[order.status]:
        ...
"""

from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


# =============================================================================
# User Roles
# =============================================================================


class Role(str, Enum):
    """Closed set of user roles, ordered from widest to narrowest reach."""

    SUPER_ADMIN = "SUPER_ADMIN"
    RESTAURANT_OWNER = "RESTAURANT_OWNER"
    MANAGER = "MANAGER"
    BRANCH_MANAGER = "BRANCH_MANAGER"
    CHEF = "CHEF"
    WAITER = "WAITER"
    STAFF = "STAFF"


# Role groups for common access patterns
RESTAURANT_TIER_ROLES: Final[frozenset[Role]] = frozenset({Role.RESTAURANT_OWNER, Role.MANAGER})
BRANCH_TIER_ROLES: Final[frozenset[Role]] = frozenset(
    {Role.BRANCH_MANAGER, Role.CHEF, Role.WAITER, Role.STAFF}
)
MANAGEMENT_ROLES: Final[frozenset[Role]] = frozenset(
    {Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER, Role.BRANCH_MANAGER}
)
OWNER_ROLES: Final[frozenset[Role]] = frozenset({Role.SUPER_ADMIN, Role.RESTAURANT_OWNER})
USER_ADMIN_ROLES: Final[frozenset[Role]] = frozenset(
    {Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER}
)


# =============================================================================
# Capabilities
# =============================================================================


class Capability:
    """Named permission strings granted to roles."""

    MANAGE_RESTAURANTS: Final[str] = "manage_restaurants"
    MANAGE_RESTAURANT: Final[str] = "manage_restaurant"
    MANAGE_BRANCHES: Final[str] = "manage_branches"
    MANAGE_BRANCH: Final[str] = "manage_branch"
    MANAGE_USERS: Final[str] = "manage_users"
    MANAGE_MENUS: Final[str] = "manage_menus"
    MANAGE_ORDERS: Final[str] = "manage_orders"
    MANAGE_SETTINGS: Final[str] = "manage_settings"
    MANAGE_ADDONS: Final[str] = "manage_addons"
    MANAGE_THEMES: Final[str] = "manage_themes"
    MANAGE_KITCHEN: Final[str] = "manage_kitchen"
    MANAGE_TABLES: Final[str] = "manage_tables"
    VIEW_ANALYTICS: Final[str] = "view_analytics"
    VIEW_BRANCH_ANALYTICS: Final[str] = "view_branch_analytics"
    VIEW_ORDERS: Final[str] = "view_orders"
    CREATE_ORDERS: Final[str] = "create_orders"
    UPDATE_ORDER_STATUS: Final[str] = "update_order_status"
    ACCESS_ALL_BRANCHES: Final[str] = "access_all_branches"
    ACCESS_RESTAURANT_BRANCHES: Final[str] = "access_restaurant_branches"
    ACCESS_ASSIGNED_BRANCHES: Final[str] = "access_assigned_branches"
    ACCESS_ASSIGNED_BRANCH: Final[str] = "access_assigned_branch"


# Role -> capability table. Read-only after import.
ROLE_PERMISSIONS: Final[Mapping[Role, frozenset[str]]] = MappingProxyType({
    Role.SUPER_ADMIN: frozenset({
        Capability.MANAGE_RESTAURANTS,
        Capability.MANAGE_BRANCHES,
        Capability.MANAGE_USERS,
        Capability.MANAGE_MENUS,
        Capability.MANAGE_ORDERS,
        Capability.MANAGE_SETTINGS,
        Capability.MANAGE_ADDONS,
        Capability.MANAGE_THEMES,
        Capability.VIEW_ANALYTICS,
        Capability.ACCESS_ALL_BRANCHES,
    }),
    Role.RESTAURANT_OWNER: frozenset({
        Capability.MANAGE_RESTAURANT,
        Capability.MANAGE_BRANCHES,
        Capability.MANAGE_USERS,
        Capability.MANAGE_MENUS,
        Capability.MANAGE_ORDERS,
        Capability.MANAGE_SETTINGS,
        Capability.VIEW_ANALYTICS,
        Capability.ACCESS_RESTAURANT_BRANCHES,
    }),
    Role.MANAGER: frozenset({
        Capability.MANAGE_BRANCHES,
        Capability.MANAGE_USERS,
        Capability.MANAGE_MENUS,
        Capability.MANAGE_ORDERS,
        Capability.VIEW_ANALYTICS,
        Capability.ACCESS_ASSIGNED_BRANCHES,
    }),
    Role.BRANCH_MANAGER: frozenset({
        Capability.MANAGE_BRANCH,
        Capability.MANAGE_USERS,
        Capability.MANAGE_MENUS,
        Capability.MANAGE_ORDERS,
        Capability.VIEW_BRANCH_ANALYTICS,
        Capability.ACCESS_ASSIGNED_BRANCH,
    }),
    Role.CHEF: frozenset({
        Capability.VIEW_ORDERS,
        Capability.UPDATE_ORDER_STATUS,
        Capability.MANAGE_KITCHEN,
        Capability.ACCESS_ASSIGNED_BRANCH,
    }),
    Role.WAITER: frozenset({
        Capability.CREATE_ORDERS,
        Capability.VIEW_ORDERS,
        Capability.UPDATE_ORDER_STATUS,
        Capability.MANAGE_TABLES,
        Capability.ACCESS_ASSIGNED_BRANCH,
    }),
    Role.STAFF: frozenset({
        Capability.VIEW_ORDERS,
        Capability.MANAGE_TABLES,
        Capability.ACCESS_ASSIGNED_BRANCH,
    }),
})

# Any of these lets an identity move an order along its lifecycle
ORDER_STATUS_CAPABILITIES: Final[frozenset[str]] = frozenset(
    {Capability.MANAGE_ORDERS, Capability.UPDATE_ORDER_STATUS}
)


# =============================================================================
# Order Constants
# =============================================================================


class OrderType(str, Enum):
    """How the order reaches the customer."""

    DINE_IN = "DINE_IN"
    TAKEAWAY = "TAKEAWAY"
    DELIVERY = "DELIVERY"


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Payment status of an order."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


TERMINAL_ORDER_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# Valid order status transitions (from -> allowed to states)
# Flow: PENDING → CONFIRMED → PREPARING → READY → DELIVERED, CANCELLED from any open state
ORDER_TRANSITIONS: Final[Mapping[OrderStatus, frozenset[OrderStatus]]] = MappingProxyType({
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),  # Terminal state
    OrderStatus.CANCELLED: frozenset(),  # Terminal state
})


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Order limits
    MAX_ORDER_ITEMS: Final[int] = 100

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_ADDRESS_LENGTH: Final[int] = 500
    MAX_PHONE_LENGTH: Final[int] = 40

    # Table limits
    MIN_TABLE_CAPACITY: Final[int] = 1
    MAX_TABLE_CAPACITY: Final[int] = 50


# Money is kept to cents
CENTS: Final[Decimal] = Decimal("0.01")
