"""
Catalog Domain Service: categories, menu items and the public branch menu.
"""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import Role
from shared.config.logging import get_logger
from shared.infrastructure.db import commit_or_raise, safe_commit
from shared.utils.exceptions import DuplicateEntityError, NotFoundError
from shared.utils.schemas import CategoryCreate, MenuItemCreate
from rest_api.models import (
    Branch,
    BranchMenu,
    Category,
    Menu,
    MenuItem,
    MenuMenuItem,
    Restaurant,
)
from rest_api.services.permissions import Identity, PermissionContext

logger = get_logger(__name__)


class MenuService:
    """Domain service for the restaurant catalog."""

    def __init__(self, db: Session):
        self._db = db

    # -------------------------------------------------------------------------
    # Public menu
    # -------------------------------------------------------------------------

    def public_menu(self, branch_id: int) -> dict:
        """
        Available items of the branch's active menus, grouped by category.

        Categories are ordered by sort_order, items by their own sort_order.
        An item linked through several menus is listed once.
        """
        branch = self._db.scalar(
            select(Branch)
            .options(selectinload(Branch.restaurant))
            .where(Branch.id == branch_id, Branch.is_active.is_(True))
        )
        if branch is None:
            raise NotFoundError("Branch", branch_id)

        items = self._db.scalars(
            select(MenuItem)
            .join(MenuMenuItem, MenuMenuItem.menu_item_id == MenuItem.id)
            .join(Menu, Menu.id == MenuMenuItem.menu_id)
            .join(BranchMenu, BranchMenu.menu_id == Menu.id)
            .options(selectinload(MenuItem.category))
            .where(
                BranchMenu.branch_id == branch.id,
                BranchMenu.is_active.is_(True),
                Menu.is_active.is_(True),
                MenuItem.available.is_(True),
                MenuItem.is_active.is_(True),
            )
            .order_by(MenuItem.sort_order, MenuItem.id)
            .distinct()
        ).all()

        categories: dict[int, dict] = {}
        for item in items:
            category = item.category
            entry = categories.setdefault(category.id, {
                "id": category.id,
                "name": category.name,
                "description": category.description,
                "sort_order": category.sort_order,
                "items": [],
            })
            entry["items"].append(item)

        return {
            "branch": branch,
            "categories": sorted(categories.values(), key=lambda c: (c["sort_order"], c["id"])),
        }

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self, restaurant_id: int, identity: Identity) -> list[dict]:
        PermissionContext(identity).require_restaurant_access(restaurant_id)

        item_count = (
            select(func.count(MenuItem.id))
            .where(MenuItem.category_id == Category.id)
            .correlate(Category)
            .scalar_subquery()
        )
        rows = self._db.execute(
            select(Category, item_count)
            .where(Category.restaurant_id == restaurant_id)
            .order_by(Category.sort_order, Category.id)
        ).all()

        return [
            {
                "id": category.id,
                "restaurant_id": category.restaurant_id,
                "name": category.name,
                "description": category.description,
                "sort_order": category.sort_order,
                "is_active": category.is_active,
                "item_count": count,
            }
            for category, count in rows
        ]

    def create_category(self, data: CategoryCreate, identity: Identity) -> Category:
        """
        Raises:
            ForbiddenError: Restaurant outside the identity's scope.
            NotFoundError: Restaurant does not exist.
            DuplicateEntityError: Name already used in the restaurant.
        """
        PermissionContext(identity).require_restaurant_access(data.restaurant_id)
        if self._db.get(Restaurant, data.restaurant_id) is None:
            raise NotFoundError("Restaurant", data.restaurant_id)

        name = data.name.strip()
        duplicate = self._db.scalar(
            select(Category.id).where(
                Category.restaurant_id == data.restaurant_id, Category.name == name
            )
        )
        if duplicate is not None:
            raise DuplicateEntityError(
                "Category name already exists in this restaurant",
                entity="Category",
                restaurant_id=data.restaurant_id,
            )

        category = Category(
            restaurant_id=data.restaurant_id,
            name=name,
            description=data.description,
            sort_order=data.sort_order,
        )
        self._db.add(category)
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            raise DuplicateEntityError(
                "Category name already exists in this restaurant", entity="Category"
            ) from e
        self._db.refresh(category)

        logger.info(
            "Category created",
            category_id=category.id,
            restaurant_id=category.restaurant_id,
            user_id=identity.user_id,
        )
        return category

    # -------------------------------------------------------------------------
    # Menu items
    # -------------------------------------------------------------------------

    def list_menu_items(self, restaurant_id: int, identity: Identity) -> list[MenuItem]:
        PermissionContext(identity).require_restaurant_access(restaurant_id)
        return list(
            self._db.scalars(
                select(MenuItem)
                .join(Category, MenuItem.category_id == Category.id)
                .options(selectinload(MenuItem.category))
                .where(Category.restaurant_id == restaurant_id)
                .order_by(MenuItem.sort_order, MenuItem.id)
            ).all()
        )

    def create_menu_item(self, data: MenuItemCreate, identity: Identity) -> MenuItem:
        """
        Raises:
            NotFoundError: Category does not exist.
            ForbiddenError: Category belongs to a restaurant outside scope.
        """
        category = self._db.get(Category, data.category_id)
        if category is None:
            raise NotFoundError("Category", data.category_id)

        ctx = PermissionContext(identity)
        if identity.role == Role.BRANCH_MANAGER:
            # Branch managers add to the catalog of their branch's restaurant
            branch = self._db.get(Branch, identity.branch_id) if identity.branch_id else None
            if branch is None or branch.restaurant_id != category.restaurant_id:
                ctx.require_restaurant_access(category.restaurant_id)
        else:
            ctx.require_restaurant_access(category.restaurant_id)

        item = MenuItem(
            category_id=category.id,
            name=data.name.strip(),
            description=data.description,
            price=data.price,
            image=data.image,
            vegetarian=data.vegetarian,
            available=data.available,
            sort_order=data.sort_order,
        )
        self._db.add(item)
        commit_or_raise(self._db, "menu item creation", category_id=category.id)
        self._db.refresh(item)

        logger.info(
            "Menu item created",
            menu_item_id=item.id,
            category_id=category.id,
            user_id=identity.user_id,
        )
        return item
