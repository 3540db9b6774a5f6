"""
Table management for branch staff.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import Role
from shared.infrastructure.db import get_db
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import TableCreate, TableOutput
from rest_api.services.domain import TableService
from rest_api.services.permissions import Identity, current_identity, require_roles


router = APIRouter(prefix="/api/tables", tags=["admin-tables"])

require_table_editor = require_roles(
    Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER, Role.BRANCH_MANAGER
)


@router.get("", response_model=list[TableOutput])
def list_tables(
    branch_id: int | None = Query(default=None, alias="branchId"),
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """Tables of a branch ordered by number; branch staff default to their own branch."""
    branch_id = branch_id if branch_id is not None else identity.branch_id
    if branch_id is None:
        raise ValidationError("Branch ID is required", field="branchId")
    return TableService(db).list_tables(branch_id, identity)


@router.post("", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def create_table(
    body: TableCreate,
    identity: Identity = Depends(require_table_editor),
    db: Session = Depends(get_db),
):
    return TableService(db).create_table(body, identity)
