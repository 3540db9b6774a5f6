"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    UnauthenticatedError,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    InvalidTransitionError,
    ConflictError,
    DatabaseError,
)
from shared.utils.validators import validate_image_url, clean_text
from shared.utils.schemas import ErrorResponse

__all__ = [
    # exceptions
    "AppException",
    "UnauthenticatedError",
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "InvalidTransitionError",
    "ConflictError",
    "DatabaseError",
    # validators
    "validate_image_url",
    "clean_text",
    # schemas
    "ErrorResponse",
]
