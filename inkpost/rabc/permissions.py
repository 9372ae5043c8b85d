"""
Role-based access control (RBAC) permissions.

Pure functions over a user's role and id; the FastAPI dependencies that
enforce them live in ``inkpost.dependencies``.
"""

from enum import StrEnum
from typing import Protocol
from uuid import UUID


class Role(StrEnum):
    READER = "reader"
    AUTHOR = "author"
    ADMIN = "admin"


class Permission(StrEnum):
    """Granular permissions for fine-grained access control."""

    WRITE_BLOGS = "write:blogs"  # own blogs unless MODERATE_BLOGS is also held
    MODERATE_BLOGS = "moderate:blogs"


class Identity(Protocol):
    id: UUID
    role: str


class Owned(Protocol):
    author_id: UUID


# Role-permission mapping: defines what permissions each role has
ROLE_PERMISSIONS: dict[str, frozenset[Permission]] = {
    Role.READER: frozenset(),
    Role.AUTHOR: frozenset({Permission.WRITE_BLOGS}),
    Role.ADMIN: frozenset(Permission),
}


def has_permission(user: Identity, permission: Permission) -> bool:
    """
    Check if user has a specific permission.

    Unknown roles have no permissions.

    Examples:
    --------
    >>> has_permission(reader, Permission.WRITE_BLOGS)
    False
    """
    return permission in ROLE_PERMISSIONS.get(user.role, frozenset())


def can_author(user: Identity) -> bool:
    """Whether ``user`` may create posts."""
    return has_permission(user, Permission.WRITE_BLOGS)


def can_modify(user: Identity, blog: Owned) -> bool:
    """
    Whether ``user`` may update or delete ``blog``.

    Admins may modify any post; everyone else only posts they wrote.
    """
    return has_permission(user, Permission.MODERATE_BLOGS) or user.id == blog.author_id
