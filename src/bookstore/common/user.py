"""Fundamental user data model for the bookstore."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Account roles with hierarchical permissions."""

    USER = "user"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        """Lower rank means more privileges."""
        return _ROLE_RANKS[self]

    def check_permission(self, required_role: Role) -> bool:
        """Check if the current role has permission for the required role.

        :param required_role: The role an operation demands
        :return: True if the current role has permission, False otherwise
        """
        return self.rank <= required_role.rank


_ROLE_RANKS = {Role.ADMIN: 0, Role.USER: 1}


@dataclass(frozen=True)
class SessionClaim:
    """Identity assertion decoded from a verified access token."""

    username: str
    role: Role
