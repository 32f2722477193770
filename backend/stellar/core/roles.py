"""Role hierarchy used by the authorization gate."""

from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """User roles for RBAC.

    Values are stored and transmitted as the case-sensitive upper-case names.
    ``INVALID`` is what an unrecognized role string parses to; it never
    satisfies any minimum.
    """

    READER = "READER"
    WRITER = "WRITER"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"
    INVALID = "INVALID"


# Role hierarchy: admin > editor > writer > reader
ROLE_HIERARCHY = {
    UserRole.READER: 0,
    UserRole.WRITER: 1,
    UserRole.EDITOR: 2,
    UserRole.ADMIN: 3,
}


def parse_role(value: Any) -> UserRole:
    """Parse a stored or claimed role string. Unknown values become INVALID."""
    if isinstance(value, UserRole):
        return value
    if not isinstance(value, str):
        return UserRole.INVALID
    try:
        return UserRole(value)
    except ValueError:
        return UserRole.INVALID


def meets_minimum(candidate: UserRole, minimum: UserRole) -> bool:
    """Return True if ``candidate`` is at or above ``minimum`` in the hierarchy."""
    if candidate not in ROLE_HIERARCHY or minimum not in ROLE_HIERARCHY:
        return False
    return ROLE_HIERARCHY[candidate] >= ROLE_HIERARCHY[minimum]
