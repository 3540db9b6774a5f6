"""
Restaurant and platform dashboard endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.constants import Role
from shared.infrastructure.db import get_db
from shared.utils.schemas import PlatformStats, RestaurantOutput, RestaurantStats
from rest_api.services.domain import BranchService, StatsService
from rest_api.services.permissions import Identity, require_roles


router = APIRouter(prefix="/api", tags=["admin-restaurants"])

require_owner = require_roles(Role.SUPER_ADMIN, Role.RESTAURANT_OWNER)
require_super_admin = require_roles(Role.SUPER_ADMIN)


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantOutput)
def get_restaurant(
    restaurant_id: int,
    identity: Identity = Depends(require_owner),
    db: Session = Depends(get_db),
):
    return BranchService(db).get_restaurant(restaurant_id, identity)


@router.get("/restaurants/{restaurant_id}/stats", response_model=RestaurantStats)
def get_restaurant_stats(
    restaurant_id: int,
    identity: Identity = Depends(require_owner),
    db: Session = Depends(get_db),
):
    return StatsService(db).restaurant_stats(restaurant_id, identity)


@router.get("/admin/super/stats", response_model=PlatformStats)
def get_platform_stats(
    identity: Identity = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """Platform-wide totals across every restaurant."""
    return StatsService(db).platform_stats()
