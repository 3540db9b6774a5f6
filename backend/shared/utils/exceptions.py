"""
Centralized HTTP exceptions for consistent error handling.

Usage:
    from shared.utils.exceptions import NotFoundError, ForbiddenError, ValidationError

    raise NotFoundError("Order", order_id)
    raise ForbiddenError()
    raise ValidationError("At least one item is required", field="items")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)

ACCESS_DENIED = "Access denied"


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class so every failure
    is logged with its context and rendered as {"error": detail}.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 401 Unauthenticated
# =============================================================================


class UnauthenticatedError(AppException):
    """
    No valid identity could be resolved (401).

    Browser clients are redirected to the sign-in page by the
    application's exception handler instead of receiving JSON.
    """

    def __init__(self, detail: str = "Authentication required", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="info",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Order", 123)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Identity resolved but the role or scope check failed (403).

    The response body is always {"error": "Access denied"}; the attempted
    action only goes to the log.
    """

    def __init__(self, action: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ACCESS_DENIED,
            log_level="warning",
            action=action,
            **log_context,
        )


class BranchAccessError(ForbiddenError):
    """Identity cannot reach the branch."""

    def __init__(self, branch_id: int | None = None, **log_context: Any):
        super().__init__("access branch", branch_id=branch_id, **log_context)


class RestaurantAccessError(ForbiddenError):
    """Identity cannot reach the restaurant."""

    def __init__(self, restaurant_id: int | None = None, **log_context: Any):
        super().__init__("access restaurant", restaurant_id=restaurant_id, **log_context)


class InsufficientRoleError(ForbiddenError):
    """Identity doesn't have one of the required roles."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        super().__init__(
            "perform action with role",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Delivery address is required", field="deliveryAddress")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Invalid {entity} status transition from {from_status} to {to_status}"
        super().__init__(
            detail,
            entity=entity,
            from_status=from_status,
            to_status=to_status,
            **log_context,
        )


class DuplicateEntityError(ValidationError):
    """Entity already exists."""

    def __init__(self, detail: str, entity: str, **log_context: Any):
        super().__init__(detail, entity=entity, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Order was modified by another request")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class StaleOrderError(ConflictError):
    """Order version moved on since the client read it."""

    def __init__(self, order_id: int, expected_version: int | None, current_version: int | None, **log_context: Any):
        super().__init__(
            "Order was modified by another request, reload and try again",
            order_id=order_id,
            expected_version=expected_version,
            current_version=current_version,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """Internal server error (500)."""

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """
    The persistence layer failed. Not retried here; the message stays
    generic and the cause is logged for operators.
    """

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
