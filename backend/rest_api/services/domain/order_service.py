"""
Order Domain Service.

Places customer orders with computed totals and moves them through the
status lifecycle:

    PENDING → CONFIRMED → PREPARING → READY → DELIVERED
    (any open state) → CANCELLED

Every applied transition writes an OrderStatusChange row.
"""

import itertools
import secrets
import threading
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from shared.config.constants import (
    CENTS,
    ORDER_STATUS_CAPABILITIES,
    ORDER_TRANSITIONS,
    OrderStatus,
    OrderType,
    PaymentStatus,
)
from shared.config.logging import orders_logger as logger, mask_phone
from shared.config.settings import settings
from shared.infrastructure.db import commit_or_raise
from shared.utils.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    StaleOrderError,
    ValidationError,
)
from shared.utils.schemas import OrderCreate
from shared.utils.validators import clean_text
from rest_api.models import (
    Branch,
    Category,
    MenuItem,
    Order,
    OrderItem,
    OrderStatusChange,
    Table,
)
from rest_api.services.permissions import Identity, PermissionContext


# =============================================================================
# Pricing
# =============================================================================


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal


def compute_totals(
    lines: Iterable[tuple[Decimal, int]],
    order_type: OrderType,
    tax_rate: Decimal | None = None,
    delivery_fee: Decimal | None = None,
) -> OrderTotals:
    """
    Price an order from (unit price, quantity) lines.

    subtotal = Σ price × quantity, tax = subtotal × tax_rate (half-up to
    cents), delivery fee only for DELIVERY orders. Pure: the same lines
    always give the same totals.
    """
    tax_rate = settings.tax_rate if tax_rate is None else tax_rate
    fee = settings.delivery_fee if delivery_fee is None else delivery_fee

    subtotal = sum(
        (Decimal(price) * quantity for price, quantity in lines),
        Decimal("0"),
    ).quantize(CENTS, rounding=ROUND_HALF_UP)
    tax = (subtotal * tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    fee = Decimal(fee).quantize(CENTS) if order_type == OrderType.DELIVERY else Decimal("0.00")

    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=fee,
        total=subtotal + tax + fee,
    )


# =============================================================================
# Order numbers
# =============================================================================


class OrderNumberGenerator:
    """
    Human-readable order numbers: ORD-{epoch_ms}-{sequence}{random}.

    The per-process sequence keeps numbers distinct within one millisecond;
    the random suffix separates processes. The unique column backs both.
    """

    SEQUENCE_MODULO = 10_000

    def __init__(self) -> None:
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def __call__(self, now_ms: int | None = None) -> str:
        if now_ms is None:
            now_ms = time.time_ns() // 1_000_000
        with self._lock:
            sequence = next(self._counter) % self.SEQUENCE_MODULO
        suffix = secrets.randbelow(1000)
        return f"ORD-{now_ms}-{sequence:04d}{suffix:03d}"


generate_order_number = OrderNumberGenerator()


# =============================================================================
# Lifecycle
# =============================================================================


def is_legal_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """Only listed successors are legal; staying in place is not a transition."""
    return requested in ORDER_TRANSITIONS.get(current, frozenset())


def _order_query():
    return select(Order).options(
        selectinload(Order.items).selectinload(OrderItem.menu_item),
        selectinload(Order.table),
    )


class OrderService:
    """
    Domain service for Order operations.

    Usage:
        service = OrderService(db)
        order = service.create_order(body)
        order = service.transition(order.id, OrderStatus.CONFIRMED, identity)
    """

    def __init__(self, db: Session):
        self._db = db

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def create_order(self, request: OrderCreate) -> Order:
        """
        Place a new order in PENDING / payment PENDING.

        Raises:
            ValidationError: Missing items or customer fields, DELIVERY without
                address, DINE_IN without table, foreign table, unknown item.
            NotFoundError: Branch does not exist.
        """
        customer_name = clean_text(request.customer_name)
        customer_phone = clean_text(request.customer_phone)
        delivery_address = clean_text(request.delivery_address)

        if not request.items:
            raise ValidationError("At least one item is required", field="items")
        if not customer_name or not customer_phone:
            raise ValidationError(
                "Customer name and phone are required",
                field="customerName" if not customer_name else "customerPhone",
            )
        if request.type == OrderType.DELIVERY and not delivery_address:
            raise ValidationError(
                "Delivery address is required for delivery orders",
                field="deliveryAddress",
            )
        if request.type == OrderType.DINE_IN and request.table_id is None:
            raise ValidationError("Table is required for dine-in orders", field="tableId")

        branch = self._db.scalar(
            select(Branch).where(Branch.id == request.branch_id, Branch.is_active.is_(True))
        )
        if branch is None:
            raise NotFoundError("Branch", request.branch_id)

        table_id = None
        if request.table_id is not None:
            table = self._db.get(Table, request.table_id)
            if table is None or table.branch_id != branch.id or not table.is_active:
                raise ValidationError(
                    "Table does not belong to this branch",
                    field="tableId",
                    table_id=request.table_id,
                    branch_id=branch.id,
                )
            table_id = table.id

        menu_items = self._load_orderable_items(
            branch.restaurant_id, {line.menu_item_id for line in request.items}
        )

        lines: list[tuple[MenuItem, int]] = []
        for line in request.items:
            menu_item = menu_items.get(line.menu_item_id)
            if menu_item is None:
                raise ValidationError(
                    f"Menu item {line.menu_item_id} is not available",
                    field="items",
                    menu_item_id=line.menu_item_id,
                )
            if line.price is not None and Decimal(line.price) != menu_item.price:
                logger.debug(
                    "Client price differs from catalog",
                    menu_item_id=menu_item.id,
                    client_price=str(line.price),
                    catalog_price=str(menu_item.price),
                )
            lines.append((menu_item, line.quantity))

        totals = compute_totals(
            ((menu_item.price, quantity) for menu_item, quantity in lines),
            request.type,
        )

        notes = clean_text(request.notes)
        if notes is None and delivery_address:
            notes = f"Delivery to: {delivery_address}"

        order = Order(
            order_number=generate_order_number(),
            type=request.type.value,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            subtotal=totals.subtotal,
            tax=totals.tax,
            delivery_fee=totals.delivery_fee,
            total=totals.total,
            branch_id=branch.id,
            table_id=table_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_email=request.customer_email,
            delivery_address=delivery_address,
            notes=notes,
            items=[
                OrderItem(menu_item_id=menu_item.id, quantity=quantity, price=menu_item.price)
                for menu_item, quantity in lines
            ],
        )
        self._db.add(order)
        commit_or_raise(self._db, "order creation", branch_id=branch.id)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            branch_id=branch.id,
            type=order.type,
            total=str(order.total),
            customer_phone=mask_phone(customer_phone),
        )
        return self._reload(order.id)

    def _load_orderable_items(self, restaurant_id: int, item_ids: set[int]) -> dict[int, MenuItem]:
        """Available items of the restaurant among item_ids, keyed by id."""
        if not item_ids:
            return {}
        rows = self._db.scalars(
            select(MenuItem)
            .join(Category, MenuItem.category_id == Category.id)
            .where(
                MenuItem.id.in_(item_ids),
                MenuItem.available.is_(True),
                MenuItem.is_active.is_(True),
                Category.restaurant_id == restaurant_id,
            )
        ).all()
        return {item.id: item for item in rows}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _reload(self, order_id: int) -> Order:
        order = self._db.scalar(_order_query().where(Order.id == order_id))
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def get_order(self, order_id: int, identity: Identity) -> Order:
        """Fetch an order the identity can reach."""
        order = self._reload(order_id)
        PermissionContext(identity).require_branch_access(
            order.branch_id, order.branch.restaurant_id
        )
        return order

    def list_orders(
        self,
        identity: Identity,
        branch_id: int | None = None,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        """
        Orders of branches the identity can reach, newest first.

        Naming a branch outside the identity's scope is refused rather than
        silently returning nothing.
        """
        ctx = PermissionContext(identity)
        query = _order_query()

        if branch_id is not None:
            branch = self._db.get(Branch, branch_id)
            ctx.require_branch_access(branch_id, branch.restaurant_id if branch else None)
            query = query.where(Order.branch_id == branch_id)

        query = ctx.filter_query(query, Order)
        if status is not None:
            query = query.where(Order.status == OrderStatus(status).value)

        return list(self._db.scalars(query.order_by(Order.created_at.desc(), Order.id.desc())).all())

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def transition(
        self,
        order_id: int,
        requested_status: OrderStatus,
        identity: Identity,
        expected_version: int | None = None,
    ) -> Order:
        """
        Move an order to requested_status.

        Checks, in order: the order exists (404), the identity reaches its
        branch (403), the role may change order status (403), the move is a
        legal successor (400), expected_version matches (409).
        """
        order = self._db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)

        ctx = PermissionContext(identity)
        ctx.require_branch_access(order.branch_id, order.branch.restaurant_id)
        ctx.require_capability(*sorted(ORDER_STATUS_CAPABILITIES))

        current = OrderStatus(order.status)
        requested = OrderStatus(requested_status)
        if not is_legal_transition(current, requested):
            raise InvalidTransitionError(
                "order", current.value, requested.value, order_id=order.id
            )

        if expected_version is not None and expected_version != order.version:
            raise StaleOrderError(order.id, expected_version, order.version)

        order.status = requested.value
        self._db.add(
            OrderStatusChange(
                order_id=order.id,
                from_status=current.value,
                to_status=requested.value,
                changed_by_id=identity.user_id,
                changed_by_role=identity.role.value,
            )
        )

        try:
            commit_or_raise(self._db, "order status update", order_id=order.id)
        except StaleDataError as e:
            raise StaleOrderError(order_id, expected_version, None) from e

        logger.info(
            "Order status changed",
            order_id=order_id,
            from_status=current.value,
            to_status=requested.value,
            user_id=identity.user_id,
            role=identity.role.value,
        )
        return self._reload(order_id)
