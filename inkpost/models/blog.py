"""Blog and blog-like database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from inkpost.configs.settings import MAX_TITLE_LENGTH

# JSONB on PostgreSQL (GIN-indexable containment), plain JSON elsewhere
TagsType = JSON().with_variant(JSONB(), "postgresql")


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    ``slug`` is derived from ``title`` by the service layer and is unique.
    ``author_id`` is written once on creation. Likes live in ``blog_likes``.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_tags_gin", "tags", postgresql_using="gin"),
        Index("ix_blogs_status_created", "status", "created_at"),
        Index("ix_blogs_author_status", "author_id", "status"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    # Foreign keys
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            Uuid,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )
    category_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "category_id",
            Uuid,
            ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        description="Category ID (foreign key to categories.id)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Blog title",
    )
    slug: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content (markdown or plain text)",
    )

    # Metadata fields
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True, server_default="draft"),
        description="Blog status (draft, published)",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(TagsType, nullable=False),
        description="Blog tags",
    )
    cover_image: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Public path of the cover image",
    )
    view_count: int = Field(
        default=0,
        nullable=False,
        description="View count",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Hello World",
                "slug": "hello-world",
                "content": "First post.",
                "status": "draft",
                "tags": ["intro"],
                "view_count": 0,
            },
        },
    )


class BlogLikeDB(SQLModel, table=True):
    """One row per (blog, user) pair; the primary key keeps likes unique."""

    __tablename__ = cast("declared_attr[str]", "blog_likes")

    blog_id: UUID = Field(
        sa_column=Column(
            "blog_id",
            Uuid,
            ForeignKey("blogs.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    user_id: UUID = Field(
        sa_column=Column(
            "user_id",
            Uuid,
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        ),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
