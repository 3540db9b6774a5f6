"""
REST API main application.
Entry point for the FastAPI REST server.

Run with:
    uvicorn rest_api.main:app --port 8000
"""

from fastapi import FastAPI

from shared.security.rate_limit import limiter
from rest_api.core.cors import configure_cors
from rest_api.core.exception_handlers import register_exception_handlers
from rest_api.core.lifespan import lifespan
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.admin import router as admin_router
from rest_api.routers.auth import router as auth_router
from rest_api.routers.orders import router as orders_router
from rest_api.routers.public import health_router, menu_router


app = FastAPI(
    title="QR Dine REST API",
    description="QR-code table ordering for restaurants and their branches",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter

register_exception_handlers(app)
register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(admin_router)
