"""
Staff API router - combines the management sub-routers.

- branches: Branch detail and branch dashboards
- restaurants: Restaurant detail, restaurant and platform dashboards
- catalog: Categories and menu items
- tables: Branch tables
- users: Staff accounts

Every route requires a bearer token; scope checks live in the services.
"""

from fastapi import APIRouter

from .branches import router as branches_router
from .restaurants import router as restaurants_router
from .catalog import router as catalog_router
from .tables import router as tables_router
from .users import router as users_router


router = APIRouter()

router.include_router(branches_router)
router.include_router(restaurants_router)
router.include_router(catalog_router)
router.include_router(tables_router)
router.include_router(users_router)


__all__ = ["router"]
