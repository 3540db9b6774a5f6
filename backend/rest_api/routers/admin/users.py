"""
Staff account management.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import Role
from shared.infrastructure.db import get_db
from shared.utils.schemas import UserCreate, UserOutput
from rest_api.services.domain import UserService
from rest_api.services.permissions import Identity, require_roles


router = APIRouter(prefix="/api/users", tags=["admin-users"])

require_user_reader = require_roles(
    Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER, Role.BRANCH_MANAGER
)
require_user_admin = require_roles(Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER)


@router.get("", response_model=list[UserOutput])
def list_users(
    restaurant_id: int | None = Query(default=None, alias="restaurantId"),
    identity: Identity = Depends(require_user_reader),
    db: Session = Depends(get_db),
):
    """
    Staff accounts visible to the caller.

    restaurantId narrows the listing for SUPER_ADMIN; other roles always
    see their own restaurant.
    """
    return UserService(db).list_users(identity, restaurant_id=restaurant_id)


@router.post("", response_model=UserOutput, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    identity: Identity = Depends(require_user_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).create_user(body, identity)
