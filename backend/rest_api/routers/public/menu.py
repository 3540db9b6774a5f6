"""
Public endpoints used by customers after scanning a table QR code.
No authentication required.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import BranchSummary, PublicMenu, TableLookupOutput
from rest_api.services.domain import BranchService, MenuService, TableService


router = APIRouter(prefix="/api", tags=["public"])


@router.get("/menu", response_model=PublicMenu)
def get_menu(
    branch_id: int = Query(alias="branchId"),
    db: Session = Depends(get_db),
):
    """Menu of an active branch, categories in display order."""
    return MenuService(db).public_menu(branch_id)


@router.get("/tables/qr/{qr_code}", response_model=TableLookupOutput)
def get_table_by_qr_code(qr_code: str, db: Session = Depends(get_db)):
    """Resolve a scanned QR code to its table, branch and restaurant."""
    return TableService(db).get_by_qr_code(qr_code)


@router.get("/branches", response_model=list[BranchSummary])
def list_branches(
    restaurant_id: int | None = Query(default=None, alias="restaurantId"),
    db: Session = Depends(get_db),
):
    """Active branches, optionally of one restaurant."""
    return BranchService(db).list_active_branches(restaurant_id)
