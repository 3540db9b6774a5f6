"""
Property-based tests with Hypothesis.

Covers pricing, the order lifecycle graph, order numbers and access scoping.
"""

import re
from decimal import Decimal

from hypothesis import given, settings, strategies as st

from shared.config.constants import (
    BRANCH_TIER_ROLES,
    ORDER_TRANSITIONS,
    RESTAURANT_TIER_ROLES,
    TERMINAL_ORDER_STATUSES,
    OrderStatus,
    OrderType,
    Role,
)
from rest_api.services.domain.order_service import (
    OrderNumberGenerator,
    compute_totals,
    is_legal_transition,
)
from rest_api.services.permissions import Identity, can_access_branch, can_access_restaurant


ORDER_NUMBER = re.compile(r"^ORD-\d+-\d{7}$")

prices = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("9999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
lines = st.lists(
    st.tuples(prices, st.integers(min_value=1, max_value=99)),
    min_size=1,
    max_size=20,
)
order_types = st.sampled_from(list(OrderType))
statuses = st.sampled_from(list(OrderStatus))


class TestPricingProperties:
    """Property-based tests for order totals."""

    @given(lines=lines, order_type=order_types)
    @settings(max_examples=100)
    def test_total_is_sum_of_parts(self, lines, order_type):
        totals = compute_totals(lines, order_type)
        assert totals.total == totals.subtotal + totals.tax + totals.delivery_fee

    @given(lines=lines, order_type=order_types)
    @settings(max_examples=100)
    def test_amounts_are_non_negative_cents(self, lines, order_type):
        totals = compute_totals(lines, order_type)
        for amount in (totals.subtotal, totals.tax, totals.delivery_fee, totals.total):
            assert amount >= 0
            assert amount == amount.quantize(Decimal("0.01"))

    @given(lines=lines)
    @settings(max_examples=50)
    def test_subtotal_is_exact(self, lines):
        totals = compute_totals(lines, OrderType.TAKEAWAY)
        assert totals.subtotal == sum((p * q for p, q in lines), Decimal("0"))

    @given(lines=lines, order_type=order_types)
    @settings(max_examples=50)
    def test_delivery_fee_only_for_delivery(self, lines, order_type):
        totals = compute_totals(lines, order_type, delivery_fee=Decimal("3.50"))
        if order_type == OrderType.DELIVERY:
            assert totals.delivery_fee == Decimal("3.50")
        else:
            assert totals.delivery_fee == 0

    @given(lines=lines, order_type=order_types)
    @settings(max_examples=50)
    def test_deterministic(self, lines, order_type):
        assert compute_totals(lines, order_type) == compute_totals(lines, order_type)

    @given(lines=lines)
    @settings(max_examples=50)
    def test_zero_tax_rate(self, lines):
        totals = compute_totals(lines, OrderType.DINE_IN, tax_rate=Decimal("0"))
        assert totals.tax == 0
        assert totals.total == totals.subtotal


class TestLifecycleProperties:
    """Property-based tests for the order status graph."""

    @given(current=statuses, requested=statuses)
    def test_legal_matches_table(self, current, requested):
        assert is_legal_transition(current, requested) == (
            requested in ORDER_TRANSITIONS[current]
        )

    @given(status=statuses)
    def test_no_self_transition(self, status):
        assert not is_legal_transition(status, status)

    @given(current=st.sampled_from(sorted(TERMINAL_ORDER_STATUSES)), requested=statuses)
    def test_terminal_states_are_final(self, current, requested):
        assert not is_legal_transition(current, requested)

    @given(status=statuses)
    def test_open_states_can_cancel(self, status):
        if status not in TERMINAL_ORDER_STATUSES:
            assert is_legal_transition(status, OrderStatus.CANCELLED)

    @given(path=st.lists(statuses, min_size=1, max_size=10))
    def test_legal_walks_never_leave_terminal(self, path):
        current = OrderStatus.PENDING
        for requested in path:
            if is_legal_transition(current, requested):
                assert current not in TERMINAL_ORDER_STATUSES
                current = requested


class TestOrderNumberProperties:
    """Property-based tests for order numbers."""

    @given(now_ms=st.integers(min_value=0, max_value=10**13))
    def test_format(self, now_ms):
        number = OrderNumberGenerator()(now_ms)
        assert ORDER_NUMBER.match(number)
        assert number.startswith(f"ORD-{now_ms}-")

    @given(count=st.integers(min_value=2, max_value=200))
    @settings(max_examples=20)
    def test_unique_within_one_millisecond(self, count):
        generate = OrderNumberGenerator()
        numbers = {generate(1_700_000_000_000) for _ in range(count)}
        assert len(numbers) == count


class TestBranchScopeProperties:
    """Property-based tests for branch and restaurant scoping."""

    ids = st.integers(min_value=1, max_value=50)
    optional_ids = st.none() | st.integers(min_value=1, max_value=50)

    @given(branch_id=ids, branch_restaurant_id=optional_ids)
    def test_super_admin_reaches_every_branch(self, branch_id, branch_restaurant_id):
        identity = Identity(user_id=1, email="root@test.com", role=Role.SUPER_ADMIN)
        assert can_access_branch(identity, branch_id, branch_restaurant_id)

    @given(
        role=st.sampled_from(sorted(RESTAURANT_TIER_ROLES)),
        own_restaurant=optional_ids,
        branch_id=ids,
        branch_restaurant_id=optional_ids,
    )
    def test_restaurant_roles_follow_branch_owner(
        self, role, own_restaurant, branch_id, branch_restaurant_id
    ):
        identity = Identity(user_id=2, email="m@test.com", role=role, restaurant_id=own_restaurant)
        expected = own_restaurant is not None and branch_restaurant_id == own_restaurant
        assert can_access_branch(identity, branch_id, branch_restaurant_id) == expected

    @given(
        role=st.sampled_from(sorted(BRANCH_TIER_ROLES)),
        own_branch=ids,
        branch_id=ids,
        restaurant_id=ids,
    )
    def test_branch_roles_only_reach_assigned_branch(
        self, role, own_branch, branch_id, restaurant_id
    ):
        identity = Identity(
            user_id=3,
            email="s@test.com",
            role=role,
            restaurant_id=restaurant_id,
            branch_id=own_branch,
        )
        assert can_access_branch(identity, branch_id, restaurant_id) == (branch_id == own_branch)
        assert not can_access_restaurant(identity, restaurant_id)
