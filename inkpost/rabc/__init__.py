"""Authorization module."""

from inkpost.rabc.permissions import (
    ROLE_PERMISSIONS,
    Permission,
    Role,
    can_author,
    can_modify,
    has_permission,
)

__all__ = [
    "Permission",
    "ROLE_PERMISSIONS",
    "Role",
    "can_author",
    "can_modify",
    "has_permission",
]
