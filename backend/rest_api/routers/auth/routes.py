"""
Authentication router.
Handles staff login and identity introspection.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shared.config.constants import ROLE_PERMISSIONS
from shared.config.logging import audit_auth_event, auth_logger as logger, mask_email
from shared.infrastructure.db import get_db
from shared.security.auth import access_token_ttl_seconds, sign_access_token
from shared.security.password import verify_password
from shared.security.rate_limit import LOGIN_RATE_LIMIT, limiter
from shared.utils.exceptions import UnauthenticatedError
from shared.utils.schemas import IdentityOutput, LoginRequest, LoginResponse, UserInfo
from rest_api.models import User
from rest_api.services.permissions import Identity, current_identity


router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """
    Authenticate a staff member and return an access token.

    Unknown email, wrong password and deactivated accounts all answer
    with the same message.
    """
    email = body.email.strip().lower()
    client_ip = request.client.host if request.client else None

    user = db.scalar(select(User).where(func.lower(User.email) == email))
    if user is None or not user.is_active:
        audit_auth_event(
            "LOGIN_FAILED",
            email=email,
            success=False,
            reason="unknown or inactive user",
            ip_address=client_ip,
        )
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    if not verify_password(body.password, user.password):
        audit_auth_event(
            "LOGIN_FAILED",
            user_id=user.id,
            email=email,
            success=False,
            reason="invalid password",
            ip_address=client_ip,
        )
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    access_token = sign_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        restaurant_id=user.restaurant_id,
        branch_id=user.branch_id,
    )

    audit_auth_event("LOGIN", user_id=user.id, email=user.email, ip_address=client_ip)
    logger.info("LOGIN_SUCCESS", email=mask_email(user.email), user_id=user.id, role=user.role)

    return LoginResponse(
        access_token=access_token,
        token_type="Bearer",
        expires_in=access_token_ttl_seconds(),
        user=UserInfo.model_validate(user),
    )


@router.get("/me", response_model=IdentityOutput)
def me(identity: Identity = Depends(current_identity)) -> IdentityOutput:
    """Return the caller's identity and capabilities."""
    return IdentityOutput(
        user_id=identity.user_id,
        email=identity.email,
        role=identity.role,
        restaurant_id=identity.restaurant_id,
        branch_id=identity.branch_id,
        capabilities=sorted(ROLE_PERMISSIONS.get(identity.role, frozenset())),
    )
