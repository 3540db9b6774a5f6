"""
Tests for the order domain service: pricing, numbering, placement
validation and status transitions.
"""

import re
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy import select

from shared.config.constants import ORDER_TRANSITIONS, OrderStatus, OrderType, Role
from shared.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from shared.utils.schemas import OrderCreate
from rest_api.models import OrderStatusChange
from rest_api.services.domain import (
    OrderService,
    compute_totals,
    generate_order_number,
    is_legal_transition,
)
from rest_api.services.domain.order_service import OrderNumberGenerator


ORDER_NUMBER_PATTERN = re.compile(r"^ORD-\d+-\d{7}$")


def build_request(branch, catalog, table=None, **overrides) -> OrderCreate:
    data = {
        "branch_id": branch.id,
        "type": OrderType.DINE_IN if table else OrderType.TAKEAWAY,
        "table_id": table.id if table else None,
        "customer_name": "Ana",
        "customer_phone": "+5491100000000",
        "items": [{"menu_item_id": catalog["burger"].id, "quantity": 2}],
    }
    data.update(overrides)
    return OrderCreate.model_validate(data)


class TestComputeTotals:
    """Test order pricing."""

    def test_dine_in_has_no_delivery_fee(self):
        totals = compute_totals(
            [(Decimal("10.00"), 2), (Decimal("2.25"), 1)],
            OrderType.DINE_IN,
            tax_rate=Decimal("0.10"),
            delivery_fee=Decimal("50"),
        )
        assert totals.subtotal == Decimal("22.25")
        assert totals.tax == Decimal("2.23")  # 2.225 rounds half-up
        assert totals.delivery_fee == Decimal("0.00")
        assert totals.total == Decimal("24.48")

    def test_delivery_adds_fee(self):
        totals = compute_totals(
            [(Decimal("100"), 1)],
            OrderType.DELIVERY,
            tax_rate=Decimal("0.10"),
            delivery_fee=Decimal("50"),
        )
        assert totals.delivery_fee == Decimal("50.00")
        assert totals.total == Decimal("160.00")

    def test_uses_configured_defaults(self):
        totals = compute_totals([(Decimal("10"), 1)], OrderType.TAKEAWAY)
        assert totals.total == totals.subtotal + totals.tax

    def test_empty_lines_cost_nothing(self):
        totals = compute_totals([], OrderType.TAKEAWAY, tax_rate=Decimal("0.10"))
        assert totals.total == Decimal("0.00")


class TestOrderNumbers:
    """Test order number generation."""

    def test_format(self):
        assert ORDER_NUMBER_PATTERN.match(generate_order_number())

    def test_unique_within_same_millisecond(self):
        generator = OrderNumberGenerator()
        numbers = {generator(now_ms=1_700_000_000_000) for _ in range(500)}
        assert len(numbers) == 500

    def test_unique_across_concurrent_callers(self):
        generator = OrderNumberGenerator()
        start = threading.Barrier(2)

        def place_many():
            start.wait()
            return [generator(now_ms=1_700_000_000_000) for _ in range(500)]

        with ThreadPoolExecutor(max_workers=2) as pool:
            batches = [f.result() for f in [pool.submit(place_many) for _ in range(2)]]

        numbers = batches[0] + batches[1]
        assert len(set(numbers)) == len(numbers) == 1000

    def test_embeds_timestamp(self):
        generator = OrderNumberGenerator()
        assert generator(now_ms=1234).startswith("ORD-1234-")


class TestTransitions:
    """Test the lifecycle graph."""

    def test_happy_path(self):
        path = [
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PREPARING,
            OrderStatus.READY,
            OrderStatus.DELIVERED,
        ]
        for current, requested in zip(path, path[1:]):
            assert is_legal_transition(current, requested)

    def test_cancel_from_every_open_state(self):
        for status in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY):
            assert is_legal_transition(status, OrderStatus.CANCELLED)

    def test_terminal_states_have_no_successors(self):
        for terminal in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            for status in OrderStatus:
                assert not is_legal_transition(terminal, status)

    def test_no_skipping_or_going_back(self):
        assert not is_legal_transition(OrderStatus.PENDING, OrderStatus.READY)
        assert not is_legal_transition(OrderStatus.READY, OrderStatus.PREPARING)
        assert not is_legal_transition(OrderStatus.PENDING, OrderStatus.PENDING)

    def test_graph_is_read_only(self):
        with pytest.raises(TypeError):
            ORDER_TRANSITIONS[OrderStatus.DELIVERED] = frozenset({OrderStatus.PENDING})


class TestCreateOrder:
    """Test order placement rules."""

    def test_dine_in_order(self, db_session, branch, table, catalog):
        order = OrderService(db_session).create_order(build_request(branch, catalog, table))

        assert order.id is not None
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == "PENDING"
        assert order.table_id == table.id
        assert order.subtotal == Decimal("20.00")
        assert order.delivery_fee == Decimal("0.00")
        assert order.total == order.subtotal + order.tax
        assert order.version == 1
        assert len(order.items) == 1
        assert order.items[0].price == Decimal("10.00")
        assert ORDER_NUMBER_PATTERN.match(order.order_number)

    def test_catalog_price_wins_over_client_price(self, db_session, branch, catalog):
        request = build_request(
            branch,
            catalog,
            items=[{"menu_item_id": catalog["burger"].id, "quantity": 1, "price": "0.01"}],
        )
        order = OrderService(db_session).create_order(request)
        assert order.items[0].price == Decimal("10.00")
        assert order.subtotal == Decimal("10.00")

    def test_delivery_order_gets_fee_and_note(self, db_session, branch, catalog):
        request = build_request(
            branch, catalog, type=OrderType.DELIVERY, delivery_address="5 Elm St"
        )
        order = OrderService(db_session).create_order(request)
        assert order.delivery_fee > 0
        assert order.notes == "Delivery to: 5 Elm St"

    def test_requires_items(self, db_session, branch, catalog):
        with pytest.raises(ValidationError) as exc_info:
            OrderService(db_session).create_order(build_request(branch, catalog, items=[]))
        assert exc_info.value.detail == "At least one item is required"

    @pytest.mark.parametrize("field", ["customer_name", "customer_phone"])
    def test_requires_customer_contact(self, db_session, branch, catalog, field):
        with pytest.raises(ValidationError) as exc_info:
            OrderService(db_session).create_order(build_request(branch, catalog, **{field: "  "}))
        assert exc_info.value.detail == "Customer name and phone are required"

    def test_delivery_requires_address(self, db_session, branch, catalog):
        with pytest.raises(ValidationError):
            OrderService(db_session).create_order(
                build_request(branch, catalog, type=OrderType.DELIVERY)
            )

    def test_dine_in_requires_table(self, db_session, branch, catalog):
        with pytest.raises(ValidationError):
            OrderService(db_session).create_order(
                build_request(branch, catalog, type=OrderType.DINE_IN)
            )

    def test_unknown_branch(self, db_session, branch, catalog):
        with pytest.raises(NotFoundError):
            OrderService(db_session).create_order(
                build_request(branch, catalog, branch_id=branch.id + 999)
            )

    def test_table_of_another_branch(self, db_session, branch, catalog, other_table):
        with pytest.raises(ValidationError):
            OrderService(db_session).create_order(
                build_request(branch, catalog, type=OrderType.DINE_IN, table_id=other_table.id)
            )

    def test_unavailable_item(self, db_session, branch, catalog):
        request = build_request(
            branch,
            catalog,
            items=[{"menu_item_id": catalog["sold_out"].id, "quantity": 1}],
        )
        with pytest.raises(ValidationError):
            OrderService(db_session).create_order(request)

    def test_item_of_another_restaurant(self, db_session, branch, catalog, foreign_item):
        request = build_request(
            branch, catalog, items=[{"menu_item_id": foreign_item.id, "quantity": 1}]
        )
        with pytest.raises(ValidationError):
            OrderService(db_session).create_order(request)


class TestTransitionService:
    """Test OrderService.transition."""

    @pytest.fixture
    def order(self, db_session, branch, table, catalog):
        return OrderService(db_session).create_order(build_request(branch, catalog, table))

    def test_placement_has_no_audit_row(self, db_session, order):
        """The trail starts with the first staff transition."""
        changes = db_session.scalars(
            select(OrderStatusChange).where(OrderStatusChange.order_id == order.id)
        ).all()
        assert changes == []
        assert order.version == 1

    def test_transition_writes_audit_row(self, db_session, order, chef, identity_of):
        service = OrderService(db_session)
        updated = service.transition(order.id, OrderStatus.CONFIRMED, identity_of(chef))

        assert updated.status == OrderStatus.CONFIRMED.value
        assert updated.version == 2

        changes = db_session.scalars(
            select(OrderStatusChange).where(OrderStatusChange.order_id == order.id)
        ).all()
        assert len(changes) == 1
        assert changes[0].from_status == "PENDING"
        assert changes[0].to_status == "CONFIRMED"
        assert changes[0].changed_by_id == chef.id
        assert changes[0].changed_by_role == Role.CHEF.value

    def test_illegal_transition(self, db_session, order, chef, identity_of):
        with pytest.raises(InvalidTransitionError):
            OrderService(db_session).transition(order.id, OrderStatus.READY, identity_of(chef))

    def test_staff_cannot_change_status(self, db_session, order, staff, identity_of):
        with pytest.raises(ForbiddenError):
            OrderService(db_session).transition(order.id, OrderStatus.CONFIRMED, identity_of(staff))

    def test_other_restaurant_cannot_change_status(self, db_session, order, rival_owner, identity_of):
        with pytest.raises(ForbiddenError):
            OrderService(db_session).transition(
                order.id, OrderStatus.CONFIRMED, identity_of(rival_owner)
            )

    def test_unknown_order(self, db_session, super_admin, identity_of):
        with pytest.raises(NotFoundError):
            OrderService(db_session).transition(999, OrderStatus.CONFIRMED, identity_of(super_admin))

    def test_stale_version_conflicts(self, db_session, order, manager, identity_of):
        service = OrderService(db_session)
        service.transition(order.id, OrderStatus.CONFIRMED, identity_of(manager), expected_version=1)

        with pytest.raises(ConflictError) as exc_info:
            service.transition(
                order.id, OrderStatus.CANCELLED, identity_of(manager), expected_version=1
            )
        assert exc_info.value.status_code == 409

    def test_terminal_order_is_final(self, db_session, order, manager, identity_of):
        service = OrderService(db_session)
        service.transition(order.id, OrderStatus.CANCELLED, identity_of(manager))
        with pytest.raises(InvalidTransitionError):
            service.transition(order.id, OrderStatus.CONFIRMED, identity_of(manager))
