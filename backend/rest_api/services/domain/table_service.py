"""
Table Domain Service.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DuplicateEntityError, NotFoundError
from shared.utils.schemas import TableCreate
from rest_api.models import Branch, Table, default_qr_code
from rest_api.services.permissions import Identity, PermissionContext

logger = get_logger(__name__)


class TableService:
    """Domain service for branch tables and QR lookup."""

    def __init__(self, db: Session):
        self._db = db

    def _require_branch(self, branch_id: int, identity: Identity) -> Branch:
        branch = self._db.get(Branch, branch_id)
        PermissionContext(identity).require_branch_access(
            branch_id, branch.restaurant_id if branch else None
        )
        if branch is None:
            raise NotFoundError("Branch", branch_id)
        return branch

    def list_tables(self, branch_id: int, identity: Identity) -> list[Table]:
        branch = self._require_branch(branch_id, identity)
        return list(
            self._db.scalars(
                select(Table).where(Table.branch_id == branch.id).order_by(Table.number)
            ).all()
        )

    def create_table(self, data: TableCreate, identity: Identity) -> Table:
        """
        Add a table; its QR code is qr-table-{branch_id}-{number}.

        Raises:
            ForbiddenError: Branch outside the identity's scope (checked first).
            NotFoundError: Branch does not exist (only reachable by SUPER_ADMIN).
            DuplicateEntityError: Number already used in the branch.
        """
        branch = self._require_branch(data.branch_id, identity)

        duplicate = self._db.scalar(
            select(Table.id).where(Table.branch_id == branch.id, Table.number == data.number)
        )
        if duplicate is not None:
            raise DuplicateEntityError(
                "Table number already exists in this branch",
                entity="Table",
                branch_id=branch.id,
                number=data.number,
            )

        table = Table(
            branch_id=branch.id,
            number=data.number,
            capacity=data.capacity,
            qr_code=default_qr_code(branch.id, data.number),
        )
        self._db.add(table)
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            raise DuplicateEntityError(
                "Table number already exists in this branch", entity="Table"
            ) from e
        self._db.refresh(table)

        logger.info(
            "Table created",
            table_id=table.id,
            branch_id=branch.id,
            number=table.number,
            user_id=identity.user_id,
        )
        return table

    def get_by_qr_code(self, qr_code: str) -> Table:
        """Public lookup of an active table by the code printed on it."""
        table = self._db.scalar(
            select(Table)
            .options(selectinload(Table.branch).selectinload(Branch.restaurant))
            .where(Table.qr_code == qr_code, Table.is_active.is_(True))
        )
        if table is None:
            raise NotFoundError("Table", qr_code)
        return table
