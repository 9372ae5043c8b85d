"""
Blog schemas for requests and responses.

Responses use camelCase aliases (``likesCount``, ``coverImage``,
``createdAt``) and are dumped with ``by_alias=True``. ``view_count`` is
exposed as ``views``.
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkpost.configs.settings import (
    MAX_CONTENT_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
)
from inkpost.utils.helpers import slugify

type BlogStatus = Literal["draft", "published"]


def normalize_tags(value: Any) -> Any:
    """
    Normalize raw tag input into a list of unique lowercase tags.

    Accepts a list, or a comma separated string (multipart forms send
    tags either way). Order of first appearance is kept.

    Examples:
    --------
    >>> normalize_tags("Bali, travel,bali")
    ['bali', 'travel']
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list | tuple):
        return value

    tags: list[str] = []
    for item in value:
        if not isinstance(item, str):
            return value  # let the field type reject it
        for part in item.split(","):
            tag = part.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
    return tags


def check_tags(tags: list[str]) -> list[str]:
    if len(tags) > MAX_TAGS:
        mssg = f"A blog can have at most {MAX_TAGS} tags"
        raise ValueError(mssg)
    for tag in tags:
        if len(tag) > MAX_TAG_LENGTH:
            mssg = f"Each tag must be 1-{MAX_TAG_LENGTH} characters"
            raise ValueError(mssg)
    return tags


def check_title(title: str) -> str:
    if not slugify(title):
        mssg = "Title must contain at least one letter or digit"
        raise ValueError(mssg)
    return title


class BlogCreate(BaseModel):
    """Blog creation payload. ``slug`` and ``author`` are never client supplied."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Blog title",
        examples=["Hello World"],
    )
    content: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CONTENT_LENGTH,
        description="Blog content (markdown or plain text)",
    )
    category: str | None = Field(default=None, description="Category ID")
    tags: list[str] = Field(default_factory=list, description="Blog tags")
    status: BlogStatus = Field(default="draft", description="Blog status")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        return normalize_tags(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return check_tags(v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return check_title(v)

    @field_validator("category", mode="before")
    @classmethod
    def blank_category(cls, v: Any) -> Any:
        """Empty form fields count as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "draft"
        return v


class BlogUpdate(BaseModel):
    """
    Partial blog update. Only fields present in the request are written.

    ``author``, ``slug`` and ``views`` are not part of the schema and are
    rejected, which keeps the author of a post immutable.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Hello Again",
                "status": "published",
                "tags": ["intro", "news"],
            },
        },
    )

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=MAX_CONTENT_LENGTH)
    category: str | None = None
    tags: list[str] | None = None
    status: BlogStatus | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        return None if v is None else normalize_tags(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else check_tags(v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return None if v is None else check_title(v)


class AuthorResponse(BaseModel):
    """Author information for blog responses (without sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    name: str


class CategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class BlogResponse(BaseModel):
    """Blog response model with joined author/category and like count."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    slug: str
    content: str
    author: AuthorResponse
    category: CategoryRef | None = None
    tags: list[str]
    status: str
    cover_image: str | None = Field(default=None, alias="coverImage")
    views: int
    likes_count: int = Field(alias="likesCount")
    created_at: str = Field(alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class BlogEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    blog: BlogResponse


class BlogDataEnvelope(BaseModel):
    success: bool = True
    message: str
    data: BlogResponse


class BlogListEnvelope(BaseModel):
    success: bool = True
    page: int
    count: int
    total: int | None = None
    blogs: list[BlogResponse]


class BlogSearchEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total: int
    page: int
    total_pages: int = Field(alias="totalPages")
    blogs: list[BlogResponse]


class LikeToggleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    liked: bool
    total_likes: int = Field(alias="totalLikes")


class StatsSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_blogs: int = Field(alias="totalBlogs")
    total_views: int = Field(alias="totalViews")
    total_likes: int = Field(alias="totalLikes")


class StatusStatsResponse(StatsSummary):
    status: str


class AuthorStatsEnvelope(BaseModel):
    success: bool = True
    stats: StatsSummary
    blogs: list[BlogResponse]


class GlobalStatsEnvelope(BaseModel):
    success: bool = True
    stats: list[StatusStatsResponse]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
