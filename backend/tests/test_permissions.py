"""
Tests for role capabilities and restaurant/branch scope checks.
"""

import pytest
from sqlalchemy import select

from shared.config.constants import (
    BRANCH_TIER_ROLES,
    RESTAURANT_TIER_ROLES,
    ROLE_PERMISSIONS,
    Capability,
    Role,
)
from shared.utils.exceptions import ACCESS_DENIED, ForbiddenError
from rest_api.models import Order
from rest_api.services.permissions import (
    STRATEGY_REGISTRY,
    BranchAccessStrategy,
    GlobalAccessStrategy,
    Identity,
    PermissionContext,
    RestaurantAccessStrategy,
    can_access_branch,
    can_access_restaurant,
    get_strategy_for_role,
    has_capability,
    require_role,
)


def make_identity(role: Role, restaurant_id=None, branch_id=None) -> Identity:
    return Identity(
        user_id=1,
        email="someone@test.com",
        role=role,
        restaurant_id=restaurant_id,
        branch_id=branch_id,
    )


class TestCapabilities:
    """Test the role -> capability table."""

    def test_every_role_has_capabilities(self):
        for role in Role:
            assert ROLE_PERMISSIONS[role], role

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[Role.STAFF] = frozenset()

    def test_super_admin_reaches_all_branches(self):
        identity = make_identity(Role.SUPER_ADMIN)
        assert has_capability(identity, Capability.ACCESS_ALL_BRANCHES)
        assert has_capability(identity, Capability.MANAGE_RESTAURANTS)

    def test_chef_updates_status_but_cannot_manage_users(self):
        identity = make_identity(Role.CHEF, 1, 1)
        assert has_capability(identity, Capability.UPDATE_ORDER_STATUS)
        assert not has_capability(identity, Capability.MANAGE_USERS)

    def test_staff_cannot_update_order_status(self):
        ctx = PermissionContext(make_identity(Role.STAFF, 1, 1))
        assert not ctx.can_update_order_status()

    def test_unknown_capability_is_never_granted(self):
        assert not has_capability(make_identity(Role.SUPER_ADMIN), "launch_rockets")


class TestStrategies:
    """Test the per-role access strategies."""

    def test_registry_covers_every_role(self):
        assert set(STRATEGY_REGISTRY) == set(Role)

    def test_strategy_tiers(self):
        assert isinstance(get_strategy_for_role(Role.SUPER_ADMIN), GlobalAccessStrategy)
        for role in RESTAURANT_TIER_ROLES:
            assert isinstance(get_strategy_for_role(role), RestaurantAccessStrategy)
        for role in BRANCH_TIER_ROLES:
            assert isinstance(get_strategy_for_role(role), BranchAccessStrategy)

    def test_super_admin_accesses_anything(self):
        identity = make_identity(Role.SUPER_ADMIN)
        assert can_access_branch(identity, 99, 42)
        assert can_access_restaurant(identity, 42)

    @pytest.mark.parametrize("role", sorted(RESTAURANT_TIER_ROLES))
    def test_restaurant_tier_limited_to_own_restaurant(self, role):
        identity = make_identity(role, restaurant_id=1)
        assert can_access_branch(identity, 10, 1)
        assert not can_access_branch(identity, 20, 2)
        assert can_access_restaurant(identity, 1)
        assert not can_access_restaurant(identity, 2)

    def test_manager_needs_branch_restaurant(self):
        """An unknown branch (no restaurant) is never granted to MANAGER."""
        identity = make_identity(Role.MANAGER, restaurant_id=1)
        assert not can_access_branch(identity, 10, None)

    def test_restaurant_tier_without_restaurant_has_no_access(self):
        identity = make_identity(Role.RESTAURANT_OWNER)
        assert not can_access_branch(identity, 10, 1)
        assert not can_access_restaurant(identity, 1)

    @pytest.mark.parametrize("role", sorted(BRANCH_TIER_ROLES))
    def test_branch_tier_limited_to_own_branch(self, role):
        identity = make_identity(role, restaurant_id=1, branch_id=10)
        assert can_access_branch(identity, 10, 1)
        assert not can_access_branch(identity, 11, 1)
        assert not can_access_restaurant(identity, 1)

    def test_branch_tier_without_branch_has_no_access(self):
        identity = make_identity(Role.WAITER, restaurant_id=1)
        assert not can_access_branch(identity, 10, 1)


class TestFilterQuery:
    """Test scoping of listings by strategy."""

    def test_global_filter_is_noop(self):
        query = select(Order)
        ctx = PermissionContext(make_identity(Role.SUPER_ADMIN))
        assert str(ctx.filter_query(query, Order)) == str(query)

    def test_branch_filter_limits_to_branch(self):
        ctx = PermissionContext(make_identity(Role.CHEF, 1, 10))
        compiled = str(ctx.filter_query(select(Order), Order))
        assert "customer_order.branch_id" in compiled

    def test_restaurant_filter_uses_branch_subquery(self):
        ctx = PermissionContext(make_identity(Role.MANAGER, restaurant_id=1))
        compiled = str(ctx.filter_query(select(Order), Order))
        assert "branch.restaurant_id" in compiled


class TestRequireHelpers:
    """Test the raising helpers and the fixed denial message."""

    def test_require_role_allows_listed_role(self):
        identity = make_identity(Role.MANAGER, 1)
        assert require_role(identity, {Role.MANAGER, Role.SUPER_ADMIN}) is identity

    def test_require_role_denies_other_roles(self):
        with pytest.raises(ForbiddenError) as exc_info:
            require_role(make_identity(Role.WAITER, 1, 1), {Role.SUPER_ADMIN})
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == ACCESS_DENIED

    def test_require_branch_access_denies_foreign_branch(self):
        ctx = PermissionContext(make_identity(Role.RESTAURANT_OWNER, restaurant_id=1))
        ctx.require_branch_access(10, 1)
        with pytest.raises(ForbiddenError) as exc_info:
            ctx.require_branch_access(20, 2)
        assert exc_info.value.detail == "Access denied"

    def test_require_capability(self):
        ctx = PermissionContext(make_identity(Role.STAFF, 1, 1))
        ctx.require_capability(Capability.VIEW_ORDERS)
        with pytest.raises(ForbiddenError):
            ctx.require_capability(Capability.MANAGE_ORDERS, Capability.UPDATE_ORDER_STATUS)

    def test_require_restaurant_access(self):
        ctx = PermissionContext(make_identity(Role.CHEF, 1, 10))
        with pytest.raises(ForbiddenError):
            ctx.require_restaurant_access(1)


class TestIdentity:
    """Test Identity construction from token claims."""

    def test_from_claims(self):
        identity = Identity.from_claims(
            {"sub": "5", "email": "w@test.com", "role": "WAITER", "restaurant_id": 2, "branch_id": 3}
        )
        assert identity.user_id == 5
        assert identity.role is Role.WAITER
        assert identity.restaurant_id == 2
        assert identity.branch_id == 3

    def test_to_dict_round_trip(self):
        identity = make_identity(Role.MANAGER, restaurant_id=4)
        data = identity.to_dict()
        assert data["role"] == "MANAGER"
        assert data["restaurant_id"] == 4
