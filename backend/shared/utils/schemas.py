"""
Shared Pydantic schemas used across the application.

Request and response bodies use camelCase on the wire; Python code uses
the snake_case attribute names.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from shared.config.constants import Limits, OrderStatus, OrderType, PaymentStatus, Role
from shared.config.settings import settings
from shared.utils.validators import validate_image_url


# =============================================================================
# Common Types
# =============================================================================

# Decimal in Python, JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base for API schemas: camelCase aliases, builds from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str


# =============================================================================
# Authentication Schemas
# =============================================================================


class LoginRequest(CamelModel):
    """Login request body."""

    email: EmailStr
    password: str = Field(min_length=1)


class UserInfo(CamelModel):
    """Basic user information included in auth responses."""

    id: int
    email: str
    name: str | None = None
    role: Role
    restaurant_id: int | None = None
    branch_id: int | None = None


class LoginResponse(CamelModel):
    """Login response with JWT token."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserInfo


class IdentityOutput(CamelModel):
    """The caller's identity and granted capabilities."""

    user_id: int
    email: str
    role: Role
    restaurant_id: int | None = None
    branch_id: int | None = None
    capabilities: list[str]


# =============================================================================
# Restaurant / Branch Schemas
# =============================================================================


class RestaurantBrief(CamelModel):
    id: int
    name: str
    logo: str | None = None


class BranchBrief(CamelModel):
    id: int
    name: str
    address: str | None = None
    phone: str | None = None


class BranchWithRestaurant(BranchBrief):
    restaurant: RestaurantBrief


class BranchSummary(CamelModel):
    """Public branch listing entry."""

    id: int
    restaurant_id: int
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool
    restaurant: RestaurantBrief
    table_count: int
    order_count: int


class TableOutput(CamelModel):
    """Table as seen by staff."""

    id: int
    branch_id: int
    number: int
    capacity: int
    qr_code: str
    is_active: bool

    @computed_field(alias="qrUrl")
    @property
    def qr_url(self) -> str:
        """Link encoded in the printed QR code."""
        return f"{settings.public_base_url.rstrip('/')}/table/{self.qr_code}"


class TableLookupOutput(TableOutput):
    """Table resolved from a scanned QR code."""

    branch: BranchWithRestaurant


class BranchDetail(CamelModel):
    """Branch with its tables and counters."""

    id: int
    restaurant_id: int
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool
    restaurant: RestaurantBrief
    tables: list[TableOutput]
    order_count: int
    staff_count: int


class RestaurantOutput(CamelModel):
    id: int
    name: str
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    logo: str | None = None
    is_active: bool
    branches: list[BranchBrief]


class TableCreate(CamelModel):
    branch_id: int
    number: int = Field(ge=1)
    capacity: int = Field(
        default=4, ge=Limits.MIN_TABLE_CAPACITY, le=Limits.MAX_TABLE_CAPACITY
    )


# =============================================================================
# Catalog Schemas
# =============================================================================


class CategoryCreate(CamelModel):
    restaurant_id: int
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    sort_order: int = 0


class CategoryOutput(CamelModel):
    id: int
    restaurant_id: int
    name: str
    description: str | None = None
    sort_order: int
    is_active: bool
    item_count: int = 0


class CategoryBrief(CamelModel):
    id: int
    name: str


class MenuItemCreate(CamelModel):
    category_id: int
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image: str | None = None
    vegetarian: bool = False
    available: bool = True
    sort_order: int = 0

    @field_validator("image")
    @classmethod
    def check_image(cls, value: str | None) -> str | None:
        return validate_image_url(value)


class MenuItemOutput(CamelModel):
    id: int
    category_id: int
    name: str
    description: str | None = None
    price: Money
    image: str | None = None
    vegetarian: bool
    available: bool
    sort_order: int
    category: CategoryBrief


class PublicMenuItem(CamelModel):
    id: int
    name: str
    description: str | None = None
    price: Money
    image: str | None = None
    vegetarian: bool
    available: bool


class PublicMenuCategory(CamelModel):
    id: int
    name: str
    description: str | None = None
    sort_order: int
    items: list[PublicMenuItem]


class PublicMenu(CamelModel):
    """Menu shown to customers after scanning a table QR code."""

    branch: BranchWithRestaurant
    categories: list[PublicMenuCategory]


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(CamelModel):
    menu_item_id: int
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    # Catalog price is authoritative; accepted for compatibility only
    price: Decimal | None = None


class OrderCreate(CamelModel):
    """
    Order placement request.

    Customer fields are checked by the order service so every entry point
    reports the same messages.
    """

    branch_id: int
    type: OrderType
    table_id: int | None = None
    customer_name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    customer_phone: str | None = Field(default=None, max_length=Limits.MAX_PHONE_LENGTH)
    customer_email: EmailStr | None = None
    delivery_address: str | None = Field(default=None, max_length=Limits.MAX_ADDRESS_LENGTH)
    notes: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    items: list[OrderItemInput] = Field(default_factory=list, max_length=Limits.MAX_ORDER_ITEMS)


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
    # Version the client last saw; omitted means "don't check"
    version: int | None = None


class MenuItemBrief(CamelModel):
    id: int
    name: str
    price: Money


class TableBrief(CamelModel):
    id: int
    number: int


class OrderItemOutput(CamelModel):
    id: int
    menu_item_id: int
    quantity: int
    price: Money
    menu_item: MenuItemBrief


class OrderOutput(CamelModel):
    id: int
    order_number: str
    type: OrderType
    status: OrderStatus
    payment_status: PaymentStatus
    subtotal: Money
    tax: Money
    delivery_fee: Money
    total: Money
    branch_id: int
    table_id: int | None = None
    table: TableBrief | None = None
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    delivery_address: str | None = None
    notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime | None = None
    items: list[OrderItemOutput]


# =============================================================================
# Statistics Schemas
# =============================================================================


class BranchStats(CamelModel):
    total_tables: int
    total_orders: int
    total_staff: int
    recent_orders: list[OrderOutput]


class StaffStats(CamelModel):
    """Today's work queue of a branch."""

    pending_orders: int
    preparing_orders: int
    ready_orders: int
    total_orders: int
    recent_orders: list[OrderOutput]


class RestaurantStats(CamelModel):
    total_branches: int
    total_orders: int
    total_users: int
    recent_orders: list[OrderOutput]


class PlatformStats(CamelModel):
    total_restaurants: int
    total_branches: int
    total_users: int
    total_orders: int
    recent_orders: list[OrderOutput]


# =============================================================================
# User Schemas
# =============================================================================


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    role: Role
    name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    phone: str | None = Field(default=None, max_length=Limits.MAX_PHONE_LENGTH)
    restaurant_id: int | None = None
    branch_id: int | None = None


class UserOutput(CamelModel):
    id: int
    email: str
    name: str | None = None
    phone: str | None = None
    role: Role
    restaurant_id: int | None = None
    branch_id: int | None = None
    is_active: bool
    created_at: datetime


# =============================================================================
# Health
# =============================================================================


class HealthResponse(BaseModel):
    status: str
    service: str
    database: str
