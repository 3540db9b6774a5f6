"""
Branch detail and dashboard endpoints for staff.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import BranchDetail, BranchStats, StaffStats
from rest_api.services.domain import BranchService, StatsService
from rest_api.services.permissions import Identity, current_identity


router = APIRouter(prefix="/api/branches", tags=["admin-branches"])


@router.get("/{branch_id}", response_model=BranchDetail)
def get_branch(
    branch_id: int,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """Branch with its tables and order/staff counters."""
    return BranchService(db).get_branch(branch_id, identity)


@router.get("/{branch_id}/stats", response_model=BranchStats)
def get_branch_stats(
    branch_id: int,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    return StatsService(db).branch_stats(branch_id, identity)


@router.get("/{branch_id}/staff-stats", response_model=StaffStats)
def get_staff_stats(
    branch_id: int,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """Today's order queue (UTC day) for the kitchen and floor staff."""
    return StatsService(db).staff_stats(branch_id, identity)
