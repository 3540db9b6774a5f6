"""
Staff User Domain Service.

Creation rules:
- SUPER_ADMIN may create any role and must name the restaurant for
  restaurant-tier roles.
- RESTAURANT_OWNER and MANAGER create users inside their own restaurant;
  a new RESTAURANT_OWNER or MANAGER inherits the caller's restaurant.
- Branch-tier roles need a branchId the caller can reach; the user's
  restaurant is the branch's restaurant.
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.config.constants import (
    BRANCH_TIER_ROLES,
    RESTAURANT_TIER_ROLES,
    Role,
)
from shared.config.logging import get_logger, mask_email
from shared.infrastructure.db import safe_commit
from shared.security.password import hash_password
from shared.utils.exceptions import (
    DuplicateEntityError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from shared.utils.schemas import UserCreate
from rest_api.models import Branch, Restaurant, User
from rest_api.services.permissions import Identity, PermissionContext

logger = get_logger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"


class UserService:
    """Domain service for staff accounts."""

    def __init__(self, db: Session):
        self._db = db

    def list_users(self, identity: Identity, restaurant_id: int | None = None) -> list[User]:
        """
        All users for SUPER_ADMIN (optionally one restaurant), otherwise the
        users of the caller's restaurant and its branches.
        """
        ctx = PermissionContext(identity)
        if ctx.is_super_admin:
            scope = restaurant_id
        else:
            scope = identity.restaurant_id
            if scope is None and identity.branch_id is not None:
                branch = self._db.get(Branch, identity.branch_id)
                scope = branch.restaurant_id if branch else None
            if scope is None:
                return []

        query = select(User).order_by(User.created_at.desc(), User.id.desc())
        if scope is not None:
            branch_ids = select(Branch.id).where(Branch.restaurant_id == scope)
            query = query.where(
                or_(User.restaurant_id == scope, User.branch_id.in_(branch_ids))
            )
        return list(self._db.scalars(query).all())

    def create_user(self, data: UserCreate, identity: Identity) -> User:
        """
        Raises:
            DuplicateEntityError: Email already registered.
            ValidationError: Missing branch or restaurant for the role.
            ForbiddenError: Role or scope beyond the caller's reach.
            NotFoundError: Named branch or restaurant does not exist.
        """
        ctx = PermissionContext(identity)
        email = data.email.lower()

        if self._db.scalar(select(User.id).where(User.email == email)) is not None:
            raise DuplicateEntityError(DUPLICATE_EMAIL, entity="User", email=mask_email(email))

        if data.role == Role.SUPER_ADMIN and not ctx.is_super_admin:
            raise ForbiddenError("create super admin", user_id=identity.user_id)

        restaurant_id: int | None = None
        branch_id: int | None = None

        if data.role in BRANCH_TIER_ROLES:
            if data.branch_id is None:
                raise ValidationError("Branch is required for this role", field="branchId")
            branch = self._db.get(Branch, data.branch_id)
            ctx.require_branch_access(data.branch_id, branch.restaurant_id if branch else None)
            if branch is None:
                raise NotFoundError("Branch", data.branch_id)
            branch_id = branch.id
            restaurant_id = branch.restaurant_id

        elif data.role in RESTAURANT_TIER_ROLES:
            if ctx.is_super_admin:
                restaurant_id = data.restaurant_id
                if restaurant_id is None:
                    raise ValidationError(
                        "Restaurant is required for this role", field="restaurantId"
                    )
                if self._db.get(Restaurant, restaurant_id) is None:
                    raise NotFoundError("Restaurant", restaurant_id)
            else:
                restaurant_id = identity.restaurant_id
                if data.restaurant_id is not None and data.restaurant_id != restaurant_id:
                    ctx.require_restaurant_access(data.restaurant_id)
                if restaurant_id is None:
                    raise ForbiddenError("create restaurant staff", user_id=identity.user_id)

        user = User(
            email=email,
            password=hash_password(data.password),
            name=data.name,
            phone=data.phone,
            role=data.role.value,
            restaurant_id=restaurant_id,
            branch_id=branch_id,
        )
        self._db.add(user)
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            raise DuplicateEntityError(DUPLICATE_EMAIL, entity="User") from e
        self._db.refresh(user)

        logger.info(
            "User created",
            new_user_id=user.id,
            role=user.role,
            restaurant_id=restaurant_id,
            branch_id=branch_id,
            created_by=identity.user_id,
        )
        return user
