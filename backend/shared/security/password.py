"""
Staff password hashing (bcrypt).

The cost factor comes from settings.bcrypt_rounds.
"""

import bcrypt

from shared.config.settings import settings
from shared.config.logging import get_logger

logger = get_logger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """Hash a staff password for storage in users.password."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Check a login attempt against the stored hash.

    Stored values that are not bcrypt hashes never match.
    """
    if not hashed_password or not hashed_password.startswith(BCRYPT_PREFIXES):
        logger.warning("Stored password is not a bcrypt hash")
        return False

    return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
