"""
Permission Context - Main entry point for permission checks.

The module-level predicates are pure functions of an Identity and the
immutable role table; PermissionContext wraps them with require_*
helpers that raise ForbiddenError and write an audit line.
"""

from typing import Any, Iterable

from sqlalchemy import Select

from shared.config.constants import (
    Role,
    ROLE_PERMISSIONS,
    ORDER_STATUS_CAPABILITIES,
)
from shared.config.logging import audit_access_denied
from shared.utils.exceptions import (
    BranchAccessError,
    ForbiddenError,
    InsufficientRoleError,
    RestaurantAccessError,
)

from .identity import Identity
from .strategies import get_strategy_for_role


def has_capability(identity: Identity, capability: str) -> bool:
    """Check the role permission table. Unknown capabilities are never granted."""
    return capability in ROLE_PERMISSIONS.get(identity.role, frozenset())


def can_access_branch(
    identity: Identity,
    branch_id: int,
    branch_restaurant_id: int | None = None,
) -> bool:
    """
    Check if identity can reach the branch.

    Pass the branch's stored restaurant_id (None if the branch does not
    exist); restaurant-tier roles are only granted branches of their own
    restaurant.
    """
    return get_strategy_for_role(identity.role).can_access_branch(
        identity, branch_id, branch_restaurant_id
    )


def can_access_restaurant(identity: Identity, restaurant_id: int) -> bool:
    """Check if identity can reach the restaurant."""
    return get_strategy_for_role(identity.role).can_access_restaurant(identity, restaurant_id)


def require_role(identity: Identity, allowed_roles: Iterable[Role]) -> Identity:
    """Return identity unchanged if its role is allowed, else raise ForbiddenError."""
    allowed = frozenset(allowed_roles)
    if identity.role not in allowed:
        audit_access_denied(identity.user_id, identity.role.value, "role")
        raise InsufficientRoleError(
            sorted(role.value for role in allowed),
            user_id=identity.user_id,
            role=identity.role.value,
        )
    return identity


class PermissionContext:
    """
    Context for performing permission checks.

    Usage:
        ctx = PermissionContext(identity)

        ctx.require_branch_access(branch.id, branch.restaurant_id)
        if ctx.has_capability(Capability.MANAGE_ORDERS):
            ...
    """

    def __init__(self, identity: Identity):
        self._identity = identity

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def user_id(self) -> int:
        return self._identity.user_id

    @property
    def role(self) -> Role:
        return self._identity.role

    @property
    def restaurant_id(self) -> int | None:
        return self._identity.restaurant_id

    @property
    def branch_id(self) -> int | None:
        return self._identity.branch_id

    @property
    def is_super_admin(self) -> bool:
        return self._identity.role == Role.SUPER_ADMIN

    @property
    def capabilities(self) -> frozenset[str]:
        return ROLE_PERMISSIONS[self._identity.role]

    def has_capability(self, capability: str) -> bool:
        return has_capability(self._identity, capability)

    def can_access_branch(self, branch_id: int, branch_restaurant_id: int | None = None) -> bool:
        return can_access_branch(self._identity, branch_id, branch_restaurant_id)

    def can_access_restaurant(self, restaurant_id: int) -> bool:
        return can_access_restaurant(self._identity, restaurant_id)

    def can_update_order_status(self) -> bool:
        return any(self.has_capability(cap) for cap in ORDER_STATUS_CAPABILITIES)

    def require_role(self, *roles: Role) -> None:
        require_role(self._identity, roles)

    def require_capability(self, *capabilities: str) -> None:
        """Raise ForbiddenError unless the role holds at least one capability."""
        if not any(self.has_capability(cap) for cap in capabilities):
            audit_access_denied(
                self.user_id, self.role.value, "capability", capabilities=list(capabilities)
            )
            raise ForbiddenError("use capability", user_id=self.user_id, role=self.role.value)

    def require_branch_access(self, branch_id: int, branch_restaurant_id: int | None = None) -> None:
        """Raise ForbiddenError if identity can't reach the branch."""
        if not self.can_access_branch(branch_id, branch_restaurant_id):
            audit_access_denied(self.user_id, self.role.value, "branch", branch_id)
            raise BranchAccessError(branch_id, user_id=self.user_id, role=self.role.value)

    def filter_query(self, query: Select, model: Any) -> Select:
        """Limit a query over a branch-owned model to reachable branches."""
        return get_strategy_for_role(self.role).filter_query(query, self._identity, model)

    def require_restaurant_access(self, restaurant_id: int) -> None:
        """Raise ForbiddenError if identity can't reach the restaurant."""
        if not self.can_access_restaurant(restaurant_id):
            audit_access_denied(self.user_id, self.role.value, "restaurant", restaurant_id)
            raise RestaurantAccessError(restaurant_id, user_id=self.user_id, role=self.role.value)
