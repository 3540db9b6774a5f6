"""
Security module: Authentication tokens, password hashing, rate limiting.
"""

from shared.security.auth import (
    sign_jwt,
    sign_access_token,
    verify_jwt,
    get_bearer_token,
    access_token_ttl_seconds,
)
from shared.security.password import hash_password, verify_password
from shared.security.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    LOGIN_RATE_LIMIT,
)

__all__ = [
    # auth
    "sign_jwt",
    "sign_access_token",
    "verify_jwt",
    "get_bearer_token",
    "access_token_ttl_seconds",
    # password
    "hash_password",
    "verify_password",
    # rate_limit
    "limiter",
    "rate_limit_exceeded_handler",
    "LOGIN_RATE_LIMIT",
]
