"""
Seed data for development and testing.
Creates a demo restaurant with two branches, a menu, tables and one
account per role.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.constants import Role
from shared.config.logging import get_logger
from shared.security.password import hash_password
from rest_api.models import (
    Branch,
    BranchMenu,
    Category,
    Menu,
    MenuItem,
    MenuMenuItem,
    Restaurant,
    Table,
    User,
    default_qr_code,
)

logger = get_logger(__name__)


SUPER_ADMIN_EMAIL = "superadmin@qrdine.dev"
SUPER_ADMIN_PASSWORD = "superadmin123"

# Shared password of the demo staff accounts
DEMO_STAFF_PASSWORD = "demo12345"

DEFAULT_TABLE_CAPACITY = 4

BRANCHES = (
    {
        "name": "Gulshan Branch",
        "address": "123 Gulshan Avenue, Dhaka 1212",
        "phone": "+8801234567891",
        "email": "gulshan@sample-restaurant.dev",
        "tables": 10,
    },
    {
        "name": "Dhanmondi Branch",
        "address": "456 Dhanmondi Road, Dhaka 1209",
        "phone": "+8801234567892",
        "email": "dhanmondi@sample-restaurant.dev",
        "tables": 8,
    },
)

# category name -> (description, [(item, description, price, vegetarian)])
CATALOG = {
    "Appetizers": (
        "Start your meal",
        [
            ("Spring Rolls", "Crispy vegetable rolls", "180.00", True),
            ("Chicken Wings", "Spicy glazed wings", "250.00", False),
        ],
    ),
    "Main Course": (
        "Hearty plates",
        [
            ("Chicken Biryani", "Fragrant rice with chicken", "350.00", False),
            ("Vegetable Curry", "Seasonal vegetables in curry sauce", "280.00", True),
            ("Grilled Fish", "Catch of the day with herbs", "450.00", False),
        ],
    ),
    "Desserts": (
        "Something sweet",
        [
            ("Gulab Jamun", "Milk dumplings in syrup", "120.00", True),
            ("Ice Cream", "Two scoops", "150.00", True),
        ],
    ),
    "Beverages": (
        "Cold and hot drinks",
        [
            ("Fresh Lime Soda", "Sweet or salted", "100.00", True),
            ("Mango Lassi", "Yogurt and mango", "120.00", True),
        ],
    ),
}


def ensure_super_admin(
    db: Session,
    email: str = SUPER_ADMIN_EMAIL,
    password: str = SUPER_ADMIN_PASSWORD,
    name: str = "Super Admin",
) -> User:
    """
    Create the platform super administrator if the email is unused.
    Idempotent: returns the existing account otherwise.
    """
    email = email.strip().lower()
    user = db.scalar(select(User).where(User.email == email))
    if user is not None:
        return user

    user = User(
        email=email,
        password=hash_password(password),
        name=name,
        role=Role.SUPER_ADMIN.value,
    )
    db.add(user)
    db.flush()
    logger.info("Super admin created", user_id=user.id)
    return user


def _seed_catalog(db: Session, restaurant: Restaurant) -> list[MenuItem]:
    items: list[MenuItem] = []
    for sort_order, (category_name, (description, entries)) in enumerate(CATALOG.items(), start=1):
        category = Category(
            restaurant_id=restaurant.id,
            name=category_name,
            description=description,
            sort_order=sort_order,
        )
        db.add(category)
        db.flush()

        for item_order, (name, item_description, price, vegetarian) in enumerate(entries, start=1):
            item = MenuItem(
                category_id=category.id,
                name=name,
                description=item_description,
                price=Decimal(price),
                vegetarian=vegetarian,
                sort_order=item_order,
            )
            db.add(item)
            items.append(item)
    db.flush()
    return items


def _seed_staff(db: Session, restaurant: Restaurant, branch: Branch) -> None:
    password = hash_password(DEMO_STAFF_PASSWORD)
    accounts = [
        ("owner@qrdine.dev", "Restaurant Owner", Role.RESTAURANT_OWNER, None),
        ("manager@qrdine.dev", "Restaurant Manager", Role.MANAGER, None),
        ("branch.manager@qrdine.dev", "Branch Manager", Role.BRANCH_MANAGER, branch.id),
        ("chef@qrdine.dev", "Head Chef", Role.CHEF, branch.id),
        ("waiter@qrdine.dev", "Waiter", Role.WAITER, branch.id),
        ("staff@qrdine.dev", "Floor Staff", Role.STAFF, branch.id),
    ]
    for email, name, role, branch_id in accounts:
        db.add(
            User(
                email=email,
                password=password,
                name=name,
                role=role.value,
                restaurant_id=restaurant.id,
                branch_id=branch_id,
            )
        )
    db.flush()


def seed(db: Session) -> None:
    """
    Seed the database with initial data.
    Idempotent: only inserts if data doesn't exist.
    """
    super_admin = ensure_super_admin(db)

    if db.scalar(select(Restaurant.id).limit(1)):
        db.commit()
        logger.info("Database already seeded, skipping")
        return

    logger.info("Seeding database")

    restaurant = Restaurant(
        name="Sample Restaurant",
        description="A QR code ordering demo restaurant",
        address="123 Gulshan Avenue, Dhaka 1212",
        phone="+8801234567890",
        email="info@sample-restaurant.dev",
        owner_id=super_admin.id,
    )
    db.add(restaurant)
    db.flush()

    branches: list[Branch] = []
    for entry in BRANCHES:
        branch = Branch(
            restaurant_id=restaurant.id,
            name=entry["name"],
            address=entry["address"],
            phone=entry["phone"],
            email=entry["email"],
        )
        db.add(branch)
        db.flush()
        for number in range(1, entry["tables"] + 1):
            db.add(
                Table(
                    branch_id=branch.id,
                    number=number,
                    capacity=DEFAULT_TABLE_CAPACITY,
                    qr_code=default_qr_code(branch.id, number),
                )
            )
        branches.append(branch)

    items = _seed_catalog(db, restaurant)

    menu = Menu(restaurant_id=restaurant.id, name="Standard Menu")
    db.add(menu)
    db.flush()
    for item in items:
        db.add(MenuMenuItem(menu_id=menu.id, menu_item_id=item.id))
    for branch in branches:
        db.add(BranchMenu(branch_id=branch.id, menu_id=menu.id))

    _seed_staff(db, restaurant, branches[0])

    db.commit()
    logger.info(
        "Database seeded",
        restaurant_id=restaurant.id,
        branches=len(branches),
        menu_items=len(items),
    )
