"""
Blog lifecycle service.

Create, update, delete and like operations with role and ownership
checks. Reads go through the repository's query engine.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import UploadFile

from inkpost.errors import (
    BlogNotFoundError,
    DatabaseError,
    DuplicateEntryError,
    ForbiddenError,
    InvalidReferenceError,
    ValidationError,
    validate_payload,
)
from inkpost.models import BlogDB, UserDB
from inkpost.monitoring import get_logger
from inkpost.rabc import can_author, can_modify
from inkpost.repositories import (
    AuthorStats,
    BlogPage,
    BlogRecord,
    BlogRepository,
    CategoryRepository,
    PageWindow,
    StatusStats,
)
from inkpost.schemas.blog import BlogCreate, BlogUpdate
from inkpost.services.cover_image import CoverImageService
from inkpost.utils.helpers import parse_uuid, slugify

logger = get_logger(__name__)

# Fields that cannot be cleared by sending null
REQUIRED_FIELDS = ("title", "content", "status", "tags")


@dataclass(frozen=True, slots=True)
class LikeToggle:
    liked: bool
    total_likes: int


def parse_blog_id(blog_id: str | UUID) -> UUID:
    """
    Parse a blog id taken from the URL.

    Raises:
        InvalidReferenceError: If ``blog_id`` is not a UUID
    """
    parsed = parse_uuid(blog_id)
    if parsed is None:
        raise InvalidReferenceError
    return parsed


class BlogService:
    """Orchestrates blog writes on top of ``BlogRepository``."""

    def __init__(
        self,
        repo: BlogRepository,
        categories: CategoryRepository,
        covers: CoverImageService | None = None,
    ) -> None:
        self.repo = repo
        self.categories = categories
        self.covers = covers or CoverImageService()

    async def _resolve_category(self, value: str | None) -> UUID | None:
        if value is None:
            return None
        category_id = parse_uuid(value)
        if category_id is None or await self.categories.get_by_id(category_id) is None:
            raise ValidationError(
                errors=[
                    {
                        "field": "category",
                        "message": "Category does not exist",
                        "type": "value_error",
                    },
                ],
            )
        return category_id

    async def _load(self, blog_id: str | UUID) -> BlogDB:
        blog = await self.repo.get_by_id(parse_blog_id(blog_id))
        if blog is None:
            raise BlogNotFoundError
        return blog

    async def _record(self, blog_id: UUID) -> BlogRecord:
        record = await self.repo.get_record(blog_id)
        if record is None:
            raise BlogNotFoundError
        return record

    async def _ensure_unique_slug(self, slug: str, exclude_id: UUID | None = None) -> None:
        if await self.repo.slug_exists(slug, exclude_id=exclude_id):
            raise DuplicateEntryError(detail=self.repo.duplicate_detail)

    async def create(
        self,
        user: UserDB,
        payload: BlogCreate,
        cover_image: UploadFile | None = None,
    ) -> BlogRecord:
        """
        Create a post authored by ``user``.

        Args:
            user: Authenticated user; must be an author or admin
            payload: Validated creation payload
            cover_image: Optional uploaded cover image

        Returns:
            BlogRecord: The created post with its joins

        Raises:
            ForbiddenError: If ``user`` may not author posts
            DuplicateEntryError: If the derived slug is taken
            ValidationError: If the category does not exist
        """
        if not can_author(user):
            raise ForbiddenError("Only authors and admins can create blogs")

        slug = slugify(payload.title)
        await self._ensure_unique_slug(slug)
        category_id = await self._resolve_category(payload.category)

        cover_path = await self.covers.save(cover_image) if cover_image else None
        blog = BlogDB(
            title=payload.title,
            slug=slug,
            content=payload.content,
            author_id=user.id,
            category_id=category_id,
            tags=payload.tags,
            status=payload.status,
            cover_image=cover_path,
        )
        try:
            blog = await self.repo.add(blog)
        except DatabaseError:
            await self.covers.storage.delete_cover_image(cover_path)
            raise

        logger.info("Blog created", blog_id=str(blog.id), author_id=str(user.id))
        return await self._record(blog.id)

    async def update(
        self,
        user: UserDB,
        blog_id: str | UUID,
        patch: Any,
    ) -> BlogRecord:
        """
        Apply a partial update to a post.

        A new title re-derives the slug. The author never changes. A raw
        ``patch`` is validated only after the ownership check, so a
        non-owner is refused whatever the payload, including one that
        is missing or not a JSON object.

        Raises:
            BlogNotFoundError: If the post does not exist
            ForbiddenError: If ``user`` is neither the author nor an admin
            ValidationError: If the patch violates ``BlogUpdate``
        """
        blog = await self._load(blog_id)
        if not can_modify(user, blog):
            raise ForbiddenError("You can only modify your own blogs")

        if not isinstance(patch, BlogUpdate):
            patch = validate_payload(BlogUpdate, patch)
        changes: dict[str, Any] = patch.model_dump(exclude_unset=True)
        for key in REQUIRED_FIELDS:
            if key in changes and changes[key] is None:
                del changes[key]

        if "title" in changes:
            slug = slugify(changes["title"])
            if slug != blog.slug:
                await self._ensure_unique_slug(slug, exclude_id=blog.id)
            changes["slug"] = slug
        if "category" in changes:
            changes["category_id"] = await self._resolve_category(changes.pop("category"))

        await self.repo.update(blog, changes)
        logger.info("Blog updated", blog_id=str(blog.id), fields=sorted(changes))
        return await self._record(blog.id)

    async def delete(self, user: UserDB, blog_id: str | UUID) -> None:
        """
        Permanently delete a post and its likes.

        Commits before removing the cover file, so a failed commit leaves
        the post and its cover intact.

        Raises:
            BlogNotFoundError: If the post does not exist
            ForbiddenError: If ``user`` is neither the author nor an admin
        """
        blog = await self._load(blog_id)
        if not can_modify(user, blog):
            raise ForbiddenError("You can only delete your own blogs")

        cover_path = blog.cover_image
        await self.repo.delete(blog)
        await self.repo.session.commit()
        await self.covers.storage.delete_cover_image(cover_path)
        logger.info("Blog deleted", blog_id=str(blog.id), by=str(user.id))

    async def toggle_like(self, user: UserDB, blog_id: str | UUID) -> LikeToggle:
        """
        Add ``user`` to the post's likes, or remove them if already present.

        Returns:
            LikeToggle: New membership and like count
        """
        blog = await self._load(blog_id)
        likes = self.repo.likes(blog.id)

        if await likes.contains(user.id):
            await likes.remove(user.id)
            liked = False
        else:
            await likes.add(user.id)
            liked = True

        return LikeToggle(liked=liked, total_likes=await likes.size())

    async def get_by_id(self, blog_id: str | UUID) -> BlogRecord:
        """Fetch a post by id. Does not count a view."""
        return await self._record(parse_blog_id(blog_id))

    async def get_by_slug(self, slug: str) -> BlogRecord:
        """Fetch a post by slug and count one view."""
        record = await self.repo.get_by_slug(slug)
        if record is None:
            raise BlogNotFoundError
        return record

    async def list_published(
        self,
        window: PageWindow,
        search: str | None = None,
        category: str | None = None,
        *,
        with_total: bool = False,
    ) -> BlogPage:
        return await self.repo.list_published(window, search, category, with_total=with_total)

    async def search(
        self,
        window: PageWindow,
        keyword: str | None = None,
        category: str | None = None,
        tag: str | None = None,
        sort: str | None = None,
    ) -> BlogPage:
        return await self.repo.search(window, keyword, category, tag, sort)

    async def author_stats(self, user: UserDB) -> AuthorStats:
        return await self.repo.stats_by_author(user.id)

    async def global_stats(self) -> list[StatusStats]:
        return await self.repo.stats_global()
