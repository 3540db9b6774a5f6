"""
CORS for the customer web app and the staff dashboard.

Browsers call the API from settings.public_base_url (the site the table
QR codes point to) and, in production, from the ALLOWED_ORIGINS list.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings


LOCAL_DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

# Orders are created with POST and moved through their lifecycle with PATCH
ALLOWED_METHODS = ["GET", "POST", "PATCH", "OPTIONS"]

ALLOWED_HEADERS = ["Authorization", "Content-Type", "Accept", "X-Request-ID"]


def get_cors_origins() -> list[str]:
    configured = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    if configured:
        return configured

    origins = [settings.public_base_url.rstrip("/")]
    if settings.environment != "production":
        origins.extend(o for o in LOCAL_DEV_ORIGINS if o not in origins)
    return origins


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=["X-Request-ID"],
        max_age=0 if settings.debug else 600,
    )
