"""Database models for the application."""

from inkpost.models.blog import BlogDB, BlogLikeDB
from inkpost.models.category import CategoryDB
from inkpost.models.user import UserDB

__all__ = ["BlogDB", "BlogLikeDB", "CategoryDB", "UserDB"]
