"""
Authenticated identity resolved from an access token.
"""

from dataclasses import dataclass
from typing import Any

from shared.config.constants import Role


@dataclass(frozen=True)
class Identity:
    """
    Who is making the request.

    restaurant_id is set for restaurant-tier roles (and branch-tier staff,
    mirroring their branch's restaurant); branch_id only for branch-tier roles.
    """

    user_id: int
    email: str
    role: Role
    restaurant_id: int | None = None
    branch_id: int | None = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Identity":
        """Build from verified JWT claims (see shared.security.auth.verify_jwt)."""
        return cls(
            user_id=int(claims["sub"]),
            email=claims.get("email", ""),
            role=Role(claims["role"]),
            restaurant_id=claims.get("restaurant_id"),
            branch_id=claims.get("branch_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "restaurant_id": self.restaurant_id,
            "branch_id": self.branch_id,
        }
