"""
FastAPI dependencies resolving the caller's identity.

Usage:
    @router.get("/orders")
    def list_orders(identity: Identity = Depends(current_identity)):
        ...

    @router.get("/admin/super/stats")
    def stats(identity: Identity = Depends(require_roles(Role.SUPER_ADMIN))):
        ...
"""

from typing import Callable

from fastapi import Depends, Header

from shared.config.constants import Role
from shared.security.auth import get_bearer_token, verify_jwt

from .context import require_role
from .identity import Identity


def current_identity(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Identity:
    """
    Resolve the identity from the bearer token.

    Raises UnauthenticatedError (401, or a redirect to the sign-in page
    for browser clients) when the token is missing or invalid.
    """
    token = get_bearer_token(authorization)
    return Identity.from_claims(verify_jwt(token))


def require_roles(*roles: Role) -> Callable[..., Identity]:
    """Dependency factory: the identity must hold one of the given roles."""
    allowed = frozenset(roles)

    def dependency(identity: Identity = Depends(current_identity)) -> Identity:
        return require_role(identity, allowed)

    return dependency
