"""
Category and menu item management.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import Role
from shared.infrastructure.db import get_db
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import CategoryCreate, CategoryOutput, MenuItemCreate, MenuItemOutput
from rest_api.services.domain import MenuService
from rest_api.services.permissions import Identity, current_identity, require_roles


router = APIRouter(prefix="/api", tags=["admin-catalog"])

require_catalog_owner = require_roles(Role.SUPER_ADMIN, Role.RESTAURANT_OWNER)
require_catalog_editor = require_roles(
    Role.SUPER_ADMIN, Role.RESTAURANT_OWNER, Role.MANAGER, Role.BRANCH_MANAGER
)


def _restaurant_scope(restaurant_id: int | None, identity: Identity) -> int:
    """Explicit restaurantId, else the caller's own restaurant."""
    restaurant_id = restaurant_id if restaurant_id is not None else identity.restaurant_id
    if restaurant_id is None:
        raise ValidationError("Restaurant ID is required", field="restaurantId")
    return restaurant_id


@router.get("/categories", response_model=list[CategoryOutput])
def list_categories(
    restaurant_id: int | None = Query(default=None, alias="restaurantId"),
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    """Categories of a restaurant with their item counts."""
    return MenuService(db).list_categories(_restaurant_scope(restaurant_id, identity), identity)


@router.post("/categories", response_model=CategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    identity: Identity = Depends(require_catalog_owner),
    db: Session = Depends(get_db),
):
    return MenuService(db).create_category(body, identity)


@router.get("/menu-items", response_model=list[MenuItemOutput])
def list_menu_items(
    restaurant_id: int | None = Query(default=None, alias="restaurantId"),
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
):
    return MenuService(db).list_menu_items(_restaurant_scope(restaurant_id, identity), identity)


@router.post("/menu-items", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    body: MenuItemCreate,
    identity: Identity = Depends(require_catalog_editor),
    db: Session = Depends(get_db),
):
    return MenuService(db).create_menu_item(body, identity)
