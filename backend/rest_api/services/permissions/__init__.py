"""
Access control: role capabilities and restaurant/branch scope checks.

Usage:
    from rest_api.services.permissions import PermissionContext, current_identity

    ctx = PermissionContext(identity)
    ctx.require_branch_access(branch.id, branch.restaurant_id)
"""

from .identity import Identity
from .strategies import (
    AccessStrategy,
    GlobalAccessStrategy,
    RestaurantAccessStrategy,
    BranchAccessStrategy,
    STRATEGY_REGISTRY,
    get_strategy_for_role,
)
from .context import (
    PermissionContext,
    has_capability,
    can_access_branch,
    can_access_restaurant,
    require_role,
)
from .dependencies import current_identity, require_roles

__all__ = [
    # Identity
    "Identity",
    # Strategies
    "AccessStrategy",
    "GlobalAccessStrategy",
    "RestaurantAccessStrategy",
    "BranchAccessStrategy",
    "STRATEGY_REGISTRY",
    "get_strategy_for_role",
    # Context
    "PermissionContext",
    "has_capability",
    "can_access_branch",
    "can_access_restaurant",
    "require_role",
    # Dependencies
    "current_identity",
    "require_roles",
]
