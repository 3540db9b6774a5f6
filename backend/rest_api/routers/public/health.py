"""
Health check endpoint for the REST API.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import get_db
from shared.utils.schemas import HealthResponse


router = APIRouter(prefix="/api", tags=["health"])

SERVICE_NAME = "rest-api"


@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Service status with database connectivity.

    Answers 503 when the database cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check failed: database unreachable", error=str(e))
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy", service=SERVICE_NAME, database="unreachable"
            ).model_dump(),
        )
    return HealthResponse(status="healthy", service=SERVICE_NAME, database="ok")
