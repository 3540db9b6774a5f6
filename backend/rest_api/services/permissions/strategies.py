"""
Permission Strategy implementations.
Strategy Pattern for scope-based access control.

Each role maps to exactly one strategy describing how far its reach
extends: everywhere, one restaurant, or one branch.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Mapping

from sqlalchemy import Select, false, select

from shared.config.constants import (
    Role,
    RESTAURANT_TIER_ROLES,
    BRANCH_TIER_ROLES,
)

from rest_api.models import Branch

from .identity import Identity


class AccessStrategy(ABC):
    """
    Abstract base for access strategies.

    Implementations answer scope questions only; capability checks go
    through the role permission table.
    """

    @property
    @abstractmethod
    def scope_name(self) -> str:
        """Human readable reach of the strategy."""
        ...

    @abstractmethod
    def can_access_branch(
        self,
        identity: Identity,
        branch_id: int,
        branch_restaurant_id: int | None = None,
    ) -> bool:
        """
        Check if identity can reach the branch.

        branch_restaurant_id is the branch's owning restaurant as stored,
        or None when the branch does not exist.
        """
        ...

    @abstractmethod
    def can_access_restaurant(self, identity: Identity, restaurant_id: int) -> bool:
        """Check if identity can reach the restaurant."""
        ...

    @abstractmethod
    def filter_query(self, query: Select, identity: Identity, model: Any) -> Select:
        """Restrict a query over a branch-owned model to reachable branches."""
        ...


class GlobalAccessStrategy(AccessStrategy):
    """
    SUPER_ADMIN: full access to every restaurant and branch.
    Ids are not checked for existence.
    """

    @property
    def scope_name(self) -> str:
        return "global"

    def can_access_branch(
        self,
        identity: Identity,
        branch_id: int,
        branch_restaurant_id: int | None = None,
    ) -> bool:
        return True

    def can_access_restaurant(self, identity: Identity, restaurant_id: int) -> bool:
        return True

    def filter_query(self, query: Select, identity: Identity, model: Any) -> Select:
        return query


class RestaurantAccessStrategy(AccessStrategy):
    """
    RESTAURANT_OWNER, MANAGER: every branch of their own restaurant.

    The branch must be shown to belong to the identity's restaurant; an
    unknown branch (no owning restaurant) is denied.
    """

    @property
    def scope_name(self) -> str:
        return "restaurant"

    def can_access_branch(
        self,
        identity: Identity,
        branch_id: int,
        branch_restaurant_id: int | None = None,
    ) -> bool:
        if identity.restaurant_id is None or branch_restaurant_id is None:
            return False
        return branch_restaurant_id == identity.restaurant_id

    def can_access_restaurant(self, identity: Identity, restaurant_id: int) -> bool:
        return identity.restaurant_id is not None and identity.restaurant_id == restaurant_id

    def filter_query(self, query: Select, identity: Identity, model: Any) -> Select:
        if identity.restaurant_id is None:
            return query.where(false())
        restaurant_branches = select(Branch.id).where(Branch.restaurant_id == identity.restaurant_id)
        return query.where(model.branch_id.in_(restaurant_branches))


class BranchAccessStrategy(AccessStrategy):
    """
    BRANCH_MANAGER, CHEF, WAITER, STAFF: only the assigned branch.
    Restaurant-wide reads are never granted.
    """

    @property
    def scope_name(self) -> str:
        return "branch"

    def can_access_branch(
        self,
        identity: Identity,
        branch_id: int,
        branch_restaurant_id: int | None = None,
    ) -> bool:
        return identity.branch_id is not None and identity.branch_id == branch_id

    def can_access_restaurant(self, identity: Identity, restaurant_id: int) -> bool:
        return False

    def filter_query(self, query: Select, identity: Identity, model: Any) -> Select:
        if identity.branch_id is None:
            return query.where(false())
        return query.where(model.branch_id == identity.branch_id)


def _build_registry() -> Mapping[Role, AccessStrategy]:
    registry: dict[Role, AccessStrategy] = {Role.SUPER_ADMIN: GlobalAccessStrategy()}
    registry.update({role: RestaurantAccessStrategy() for role in RESTAURANT_TIER_ROLES})
    registry.update({role: BranchAccessStrategy() for role in BRANCH_TIER_ROLES})

    missing = set(Role) - set(registry)
    if missing:
        names = ", ".join(sorted(role.value for role in missing))
        raise RuntimeError(f"No access strategy registered for roles: {names}")
    return MappingProxyType(registry)


# Strategy registry, checked at import to cover every Role
STRATEGY_REGISTRY: Mapping[Role, AccessStrategy] = _build_registry()


def get_strategy_for_role(role: Role) -> AccessStrategy:
    """Get the access strategy for a role."""
    return STRATEGY_REGISTRY[role]
