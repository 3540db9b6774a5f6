"""
Startup and shutdown of the REST API.

Startup configures logging, refuses insecure production settings, makes
sure the schema exists and, in development only, loads the demo data.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine, get_db_context
from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from rest_api.models import Base
from rest_api.seed import seed


def check_configuration() -> None:
    """Log every configuration problem; abort startup on them in production."""
    problems = settings.validate_production_secrets()
    for problem in problems:
        logger.error("Configuration error", error=problem)
    if problems and settings.environment == "production":
        raise RuntimeError("Refusing to start with insecure configuration: " + "; ".join(problems))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()

    logger.info(
        "Starting QR Dine REST API",
        port=settings.rest_api_port,
        env=settings.environment,
    )

    Base.metadata.create_all(bind=engine)

    if settings.environment == "development":
        with get_db_context() as db:
            seed(db)

    yield

    logger.info("Shutting down QR Dine REST API")
    engine.dispose()
