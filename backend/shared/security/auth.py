"""
Staff authentication tokens.

Access tokens are HS256 JWTs carrying the identity claims the access
control layer needs: sub, email, role, restaurant_id, branch_id.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt

from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.constants import Role
from shared.config.logging import get_logger
from shared.utils.exceptions import UnauthenticatedError

logger = get_logger(__name__)


def access_token_ttl_seconds() -> int:
    return settings.jwt_access_token_expire_minutes * 60


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, role, restaurant_id, ...)
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = access_token_ttl_seconds()

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def sign_access_token(
    user_id: int,
    email: str,
    role: str,
    restaurant_id: int | None,
    branch_id: int | None,
) -> str:
    """Issue an access token for a signed-in staff member."""
    return sign_jwt({
        "sub": str(user_id),
        "email": email,
        "role": role,
        "restaurant_id": restaurant_id,
        "branch_id": branch_id,
    })


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        UnauthenticatedError: If the token is invalid, expired or its claims
            don't describe a known role.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError as e:
        # Keep the library message out of the response
        logger.warning("JWT validation failed", error=str(e))
        raise UnauthenticatedError("Invalid token")

    try:
        int(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise UnauthenticatedError("Invalid token: malformed subject claim")

    if payload.get("role") not in {r.value for r in Role}:
        raise UnauthenticatedError("Invalid token: unknown role")

    for claim in ("restaurant_id", "branch_id"):
        value = payload.get(claim)
        if value is not None and not isinstance(value, int):
            raise UnauthenticatedError(f"Invalid token: malformed {claim} claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract the token from an Authorization header.

    Returns:
        The token string without "Bearer " prefix.

    Raises:
        UnauthenticatedError: If header is missing or not a bearer credential.
    """
    if not authorization:
        raise UnauthenticatedError("Missing Authorization header")

    if not authorization.startswith("Bearer "):
        raise UnauthenticatedError(
            "Invalid Authorization header format. Expected: Bearer <token>"
        )

    return authorization[7:]
