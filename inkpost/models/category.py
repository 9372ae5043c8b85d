"""Category database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from inkpost.configs.settings import MAX_CATEGORY_NAME_LENGTH


class CategoryDB(SQLModel, table=True):
    """Category a blog post can optionally belong to."""

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Category ID",
    )
    name: str = Field(
        sa_column=Column(String(MAX_CATEGORY_NAME_LENGTH), unique=True, nullable=False),
        description="Category name (unique)",
    )
    slug: str = Field(
        sa_column=Column(String(MAX_CATEGORY_NAME_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
