"""Repository layer for database operations."""

from inkpost.repositories.blog import (
    AuthorStats,
    BlogPage,
    BlogQuery,
    BlogRecord,
    BlogRepository,
    LikeSet,
    PageWindow,
    SortOrder,
    StatusStats,
)
from inkpost.repositories.category import CategoryRepository
from inkpost.repositories.user import UserRepository

__all__ = [
    "AuthorStats",
    "BlogPage",
    "BlogQuery",
    "BlogRecord",
    "BlogRepository",
    "CategoryRepository",
    "LikeSet",
    "PageWindow",
    "SortOrder",
    "StatusStats",
    "UserRepository",
]
