"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time; keep the app off the real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.config.constants import Role
from shared.infrastructure.db import get_db
from shared.security.auth import sign_access_token
from shared.security.password import hash_password
from shared.security.rate_limit import limiter
from rest_api.main import app
from rest_api.models import (
    Base,
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
from rest_api.services.permissions import Identity


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    Rate limiting is off unless a test turns it on.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = False
    limiter.reset()
    app.dependency_overrides.clear()


# =============================================================================
# Restaurants and branches
# =============================================================================


@pytest.fixture
def restaurant(db_session):
    restaurant = Restaurant(name="Test Restaurant", address="1 Main St", phone="+100000001")
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def branch(db_session, restaurant):
    branch = Branch(
        restaurant_id=restaurant.id,
        name="Test Branch",
        address="123 Test St",
        phone="+1234567890",
    )
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture
def second_branch(db_session, restaurant):
    """Another branch of the same restaurant."""
    branch = Branch(restaurant_id=restaurant.id, name="Second Branch")
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture
def other_restaurant(db_session):
    restaurant = Restaurant(name="Rival Restaurant")
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def other_branch(db_session, other_restaurant):
    """A branch belonging to a different restaurant."""
    branch = Branch(restaurant_id=other_restaurant.id, name="Rival Branch")
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture
def table(db_session, branch):
    table = Table(
        branch_id=branch.id,
        number=1,
        capacity=4,
        qr_code=default_qr_code(branch.id, 1),
    )
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def other_table(db_session, other_branch):
    table = Table(
        branch_id=other_branch.id,
        number=1,
        qr_code=default_qr_code(other_branch.id, 1),
    )
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


# =============================================================================
# Catalog
# =============================================================================


@pytest.fixture
def catalog(db_session, restaurant, branch):
    """
    Two categories and three items on a menu published at `branch`.

    Returns a dict with the created objects keyed by short names.
    """
    mains = Category(restaurant_id=restaurant.id, name="Mains", sort_order=2)
    drinks = Category(restaurant_id=restaurant.id, name="Drinks", sort_order=1)
    db_session.add_all([mains, drinks])
    db_session.flush()

    burger = MenuItem(category_id=mains.id, name="Burger", price=Decimal("10.00"), sort_order=1)
    pasta = MenuItem(
        category_id=mains.id, name="Pasta", price=Decimal("12.50"), vegetarian=True, sort_order=2
    )
    soda = MenuItem(category_id=drinks.id, name="Soda", price=Decimal("2.25"))
    sold_out = MenuItem(
        category_id=mains.id, name="Lobster", price=Decimal("40.00"), available=False
    )
    db_session.add_all([burger, pasta, soda, sold_out])
    db_session.flush()

    menu = Menu(restaurant_id=restaurant.id, name="Standard")
    db_session.add(menu)
    db_session.flush()
    for item in (burger, pasta, soda, sold_out):
        db_session.add(MenuMenuItem(menu_id=menu.id, menu_item_id=item.id))
    db_session.add(BranchMenu(branch_id=branch.id, menu_id=menu.id))
    db_session.commit()

    return {
        "mains": mains,
        "drinks": drinks,
        "burger": burger,
        "pasta": pasta,
        "soda": soda,
        "sold_out": sold_out,
        "menu": menu,
    }


@pytest.fixture
def foreign_item(db_session, other_restaurant):
    """A menu item of another restaurant."""
    category = Category(restaurant_id=other_restaurant.id, name="Foreign")
    db_session.add(category)
    db_session.flush()
    item = MenuItem(category_id=category.id, name="Foreign Dish", price=Decimal("9.00"))
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


# =============================================================================
# Users and credentials
# =============================================================================


@pytest.fixture
def make_user(db_session):
    """
    Factory creating a user with TEST_PASSWORD.

    Branch-tier users inherit the branch's restaurant.
    """
    def _make(role: Role, restaurant=None, branch=None, email=None, is_active=True):
        restaurant_id = restaurant.id if restaurant is not None else None
        if branch is not None and restaurant_id is None:
            restaurant_id = branch.restaurant_id
        user = User(
            email=email or f"{role.value.lower()}-{restaurant_id}-{branch.id if branch else 0}@test.com",
            password=hash_password(TEST_PASSWORD),
            name=role.value.title(),
            role=role.value,
            restaurant_id=restaurant_id,
            branch_id=branch.id if branch is not None else None,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


def identity_for(user: User) -> Identity:
    return Identity(
        user_id=user.id,
        email=user.email,
        role=Role(user.role),
        restaurant_id=user.restaurant_id,
        branch_id=user.branch_id,
    )


def headers_for(user: User) -> dict:
    token = sign_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        restaurant_id=user.restaurant_id,
        branch_id=user.branch_id,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin(make_user):
    return make_user(Role.SUPER_ADMIN, email="root@test.com")


@pytest.fixture
def owner(make_user, restaurant):
    return make_user(Role.RESTAURANT_OWNER, restaurant=restaurant, email="owner@test.com")


@pytest.fixture
def manager(make_user, restaurant):
    return make_user(Role.MANAGER, restaurant=restaurant, email="manager@test.com")


@pytest.fixture
def branch_manager(make_user, branch):
    return make_user(Role.BRANCH_MANAGER, branch=branch, email="bm@test.com")


@pytest.fixture
def chef(make_user, branch):
    return make_user(Role.CHEF, branch=branch, email="chef@test.com")


@pytest.fixture
def waiter(make_user, branch):
    return make_user(Role.WAITER, branch=branch, email="waiter@test.com")


@pytest.fixture
def staff(make_user, branch):
    return make_user(Role.STAFF, branch=branch, email="staff@test.com")


@pytest.fixture
def rival_owner(make_user, other_restaurant):
    return make_user(Role.RESTAURANT_OWNER, restaurant=other_restaurant, email="rival@test.com")


# =============================================================================
# Orders
# =============================================================================


@pytest.fixture
def order_payload(branch, table, catalog):
    """Valid DINE_IN order body: 2 burgers and 1 soda."""
    return {
        "branchId": branch.id,
        "tableId": table.id,
        "type": "DINE_IN",
        "customerName": "Ana",
        "customerPhone": "+5491100000000",
        "items": [
            {"menuItemId": catalog["burger"].id, "quantity": 2},
            {"menuItemId": catalog["soda"].id, "quantity": 1},
        ],
    }


@pytest.fixture
def placed_order(client, order_payload):
    """An order placed through the public endpoint (JSON body)."""
    response = client.post("/api/orders", json=order_payload)
    assert response.status_code == 201, response.json()
    return response.json()


@pytest.fixture
def auth_headers():
    """Bearer headers for a user: auth_headers(user)."""
    return headers_for


@pytest.fixture
def identity_of():
    """Identity for a user, for calling services directly."""
    return identity_for
