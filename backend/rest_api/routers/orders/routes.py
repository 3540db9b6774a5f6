"""
Order endpoints.

Placing an order is public (customers at a table or ordering for pickup);
reading and moving orders through their lifecycle requires a staff token.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import OrderStatus
from shared.infrastructure.db import get_db
from shared.utils.schemas import OrderCreate, OrderOutput, OrderStatusUpdate
from rest_api.services.domain import OrderService
from rest_api.services.permissions import Identity, current_identity


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(body: OrderCreate, db: Session = Depends(get_db)):
    """Place an order; totals come from catalog prices."""
    return OrderService(db).create_order(body)


@router.get("", response_model=list[OrderOutput])
def list_orders(
    branch_id: int | None = Query(default=None, alias="branchId"),
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """Orders of the branches the caller can reach, newest first."""
    return OrderService(db).list_orders(identity, branch_id=branch_id, status=order_status)


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_order(order_id, identity)


@router.patch("/{order_id}", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """
    Move an order to a new status.

    When the body carries the version the client last saw, a concurrent
    change answers 409 instead of being overwritten.
    """
    return OrderService(db).transition(
        order_id, body.status, identity, expected_version=body.version
    )
