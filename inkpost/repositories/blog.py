"""
Blog repository: the query and aggregation engine for posts.

Listing, search and statistics are compiled from a ``BlogQuery`` (filter
predicates + sort key) and a ``PageWindow`` into a single SELECT that
joins the author and category and computes ``likes_count`` from the
``blog_likes`` table.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from math import ceil
from typing import Any
from uuid import UUID

from sqlalchemy import (
    ColumnElement,
    Integer,
    Row,
    Select,
    cast,
    delete,
    func,
    or_,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql.selectable import Subquery

from inkpost.configs import settings
from inkpost.models import BlogDB, BlogLikeDB, CategoryDB, UserDB
from inkpost.monitoring import get_logger
from inkpost.repositories.base import BaseRepository
from inkpost.utils.helpers import escape_like, parse_positive_int, parse_uuid

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


class SortOrder(StrEnum):
    """Sort keys accepted by search. Ties are broken by newest first."""

    LATEST = "latest"
    VIEWS = "views"
    LIKES = "likes"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """
        Parse a sort parameter, falling back to ``LATEST``.

        Examples:
        --------
        >>> SortOrder.parse("Views")
        <SortOrder.VIEWS: 'views'>
        >>> SortOrder.parse("oldest")
        <SortOrder.LATEST: 'latest'>
        """
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.LATEST


@dataclass(frozen=True, slots=True)
class PageWindow:
    """1-based page window. ``offset`` is ``(page - 1) * limit``."""

    page: int = 1
    limit: int = 10

    @classmethod
    def from_params(cls, page: str | int | None, limit: str | int | None) -> "PageWindow":
        """Build a window from raw query parameters, defaulting bad values."""
        return cls(
            page=parse_positive_int(page, settings.DEFAULT_PAGE),
            limit=parse_positive_int(
                limit,
                settings.DEFAULT_PAGE_SIZE,
                maximum=settings.MAX_PAGE_SIZE,
            ),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return ceil(total / self.limit)


@dataclass(frozen=True, slots=True)
class BlogQuery:
    """
    Composable filter and sort description for blog listings.

    Attributes:
        status: Only posts with this status (None for every status)
        author_id: Only posts by this author
        title: Case-insensitive substring of the title
        keyword: Case-insensitive substring of the title or the content
        category: Category id; values that are not valid UUIDs are ignored
        tag: Exact tag membership
        sort: Result ordering
    """

    status: str | None = "published"
    author_id: UUID | None = None
    title: str | None = None
    keyword: str | None = None
    category: str | UUID | None = None
    tag: str | None = None
    sort: SortOrder = SortOrder.LATEST

    def conditions(self, dialect: str) -> list[ColumnElement[bool]]:
        """Compile the filters into SQL predicates for ``dialect``."""
        clauses: list[ColumnElement[bool]] = []
        if self.status is not None:
            # pyrefly: ignore [bad-argument-type]
            clauses.append(BlogDB.status == self.status)
        if self.author_id is not None:
            # pyrefly: ignore [bad-argument-type]
            clauses.append(BlogDB.author_id == self.author_id)

        title = (self.title or "").strip()
        if title:
            # pyrefly: ignore [missing-attribute]
            clauses.append(BlogDB.title.ilike(contains_pattern(title), escape=LIKE_ESCAPE))

        keyword = (self.keyword or "").strip()
        if keyword:
            pattern = contains_pattern(keyword)
            clauses.append(
                or_(
                    # pyrefly: ignore [missing-attribute]
                    BlogDB.title.ilike(pattern, escape=LIKE_ESCAPE),
                    # pyrefly: ignore [missing-attribute]
                    BlogDB.content.ilike(pattern, escape=LIKE_ESCAPE),
                ),
            )

        category_id = parse_uuid(self.category) if self.category else None
        if category_id is not None:
            # pyrefly: ignore [bad-argument-type]
            clauses.append(BlogDB.category_id == category_id)

        tag = (self.tag or "").strip().lower()
        if tag:
            clauses.append(has_tag(tag, dialect))

        return clauses


@dataclass(frozen=True, slots=True)
class BlogRecord:
    """A post joined with its author, category and like count."""

    blog: BlogDB
    author: UserDB
    category: CategoryDB | None
    likes_count: int


@dataclass(frozen=True, slots=True)
class BlogPage:
    """One page of records. ``total`` is only set when it was requested."""

    items: list[BlogRecord]
    window: PageWindow
    total: int | None = None

    @property
    def page(self) -> int:
        return self.window.page

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return self.window.total_pages(self.total or 0)


@dataclass(frozen=True, slots=True)
class AuthorStats:
    total_blogs: int = 0
    total_views: int = 0
    total_likes: int = 0
    blogs: list[BlogRecord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class StatusStats:
    status: str
    total_blogs: int
    total_views: int
    total_likes: int


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` anywhere, with wildcards escaped."""
    return f"%{escape_like(text, LIKE_ESCAPE)}%"


def has_tag(tag: str, dialect: str) -> ColumnElement[bool]:
    """
    Predicate for ``tag`` being a member of ``blogs.tags``.

    PostgreSQL uses JSONB containment (served by the GIN index); other
    backends expand the JSON array with ``json_each``.
    """
    if dialect == "postgresql":
        # pyrefly: ignore [missing-attribute]
        return BlogDB.tags.cast(JSONB).contains([tag])

    members = func.json_each(BlogDB.tags).table_valued("value")
    return select(1).select_from(members).where(members.c.value == tag).exists()


def like_totals() -> Subquery:
    """Per-post like counts from ``blog_likes``."""
    return (
        select(BlogLikeDB.blog_id, func.count().label("likes_count"))
        .group_by(BlogLikeDB.blog_id)
        .subquery("like_totals")
    )


def sort_keys(sort: SortOrder, likes_count: ColumnElement[int]) -> list[Any]:
    # pyrefly: ignore [missing-attribute]
    newest = BlogDB.created_at.desc()
    match sort:
        case SortOrder.VIEWS:
            # pyrefly: ignore [missing-attribute]
            return [BlogDB.view_count.desc(), newest]
        case SortOrder.LIKES:
            return [likes_count.desc(), newest]
        case _:
            return [newest]


def to_record(row: Row[Any]) -> BlogRecord:
    blog, author, category, likes_count = row
    return BlogRecord(blog=blog, author=author, category=category, likes_count=likes_count or 0)


class LikeSet:
    """
    The set of users who liked one post.

    Membership is backed by ``blog_likes`` rows whose primary key is
    ``(blog_id, user_id)``, so a user is in the set at most once.
    """

    def __init__(self, session: Any, blog_id: UUID) -> None:
        self.session = session
        self.blog_id = blog_id

    async def contains(self, user_id: UUID) -> bool:
        statement = select(1).where(
            # pyrefly: ignore [bad-argument-type]
            BlogLikeDB.blog_id == self.blog_id,
            # pyrefly: ignore [bad-argument-type]
            BlogLikeDB.user_id == user_id,
        )
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None

    async def add(self, user_id: UUID) -> bool:
        """
        Add ``user_id``; returns False when it was already a member.

        The insert runs in a savepoint, so a concurrent request that added
        the same like first only rolls back this insert.
        """
        if await self.contains(user_id):
            return False
        try:
            async with self.session.begin_nested():
                self.session.add(BlogLikeDB(blog_id=self.blog_id, user_id=user_id))
                await self.session.flush()
        except IntegrityError:
            logger.info("Like already recorded", blog_id=str(self.blog_id), user_id=str(user_id))
            return False
        return True

    async def remove(self, user_id: UUID) -> bool:
        """Remove ``user_id``; returns False when it was not a member."""
        statement = delete(BlogLikeDB).where(
            # pyrefly: ignore [bad-argument-type]
            BlogLikeDB.blog_id == self.blog_id,
            # pyrefly: ignore [bad-argument-type]
            BlogLikeDB.user_id == user_id,
        )
        result = await self.session.execute(statement)
        return result.rowcount > 0

    async def size(self) -> int:
        statement = (
            select(func.count())
            .select_from(BlogLikeDB)
            # pyrefly: ignore [bad-argument-type]
            .where(BlogLikeDB.blog_id == self.blog_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()


class BlogRepository(BaseRepository[BlogDB]):
    """
    Repository for Blog database operations.

    Besides plain CRUD it answers the listing, search, slug lookup and
    statistics queries used by the public API.
    """

    model = BlogDB
    duplicate_detail = "A blog with this title already exists"

    @property
    def dialect(self) -> str:
        return self.session.get_bind().dialect.name

    def _select_records(
        self,
        conditions: Sequence[ColumnElement[bool]],
        sort: SortOrder = SortOrder.LATEST,
    ) -> Select[Any]:
        totals = like_totals()
        likes_count = func.coalesce(totals.c.likes_count, 0)
        return (
            select(BlogDB, UserDB, CategoryDB, likes_count.label("likes_count"))
            # pyrefly: ignore [bad-argument-type]
            .join(UserDB, UserDB.id == BlogDB.author_id)
            # pyrefly: ignore [bad-argument-type]
            .outerjoin(CategoryDB, CategoryDB.id == BlogDB.category_id)
            .outerjoin(totals, totals.c.blog_id == BlogDB.id)
            .where(*conditions)
            .order_by(*sort_keys(sort, likes_count))
            .execution_options(populate_existing=True)
        )

    async def _count(self, conditions: Sequence[ColumnElement[bool]]) -> int:
        statement = select(func.count()).select_from(BlogDB).where(*conditions)
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def find(
        self,
        query: BlogQuery,
        window: PageWindow,
        *,
        with_total: bool = False,
    ) -> BlogPage:
        """
        Run ``query`` and return the rows inside ``window``.

        Args:
            query: Filters and sort order
            window: Page window
            with_total: Also count every matching row

        Returns:
            BlogPage: Page of records (empty when nothing matches)
        """
        conditions = query.conditions(self.dialect)
        statement = (
            self._select_records(conditions, query.sort).offset(window.offset).limit(window.limit)
        )
        result = await self.session.execute(statement)
        items = [to_record(row) for row in result.all()]
        total = await self._count(conditions) if with_total else None
        return BlogPage(items=items, window=window, total=total)

    async def list_published(
        self,
        window: PageWindow,
        search: str | None = None,
        category: str | None = None,
        *,
        with_total: bool = False,
    ) -> BlogPage:
        """Published posts, newest first, optionally filtered by title and category."""
        query = BlogQuery(title=search, category=category)
        return await self.find(query, window, with_total=with_total)

    async def search(
        self,
        window: PageWindow,
        keyword: str | None = None,
        category: str | None = None,
        tag: str | None = None,
        sort: str | None = None,
    ) -> BlogPage:
        """
        Search published posts by keyword, category and tag.

        The keyword matches the title or the content. Unknown sort values
        fall back to newest first. The total is always counted.
        """
        query = BlogQuery(
            keyword=keyword,
            category=category,
            tag=tag,
            sort=SortOrder.parse(sort),
        )
        return await self.find(query, window, with_total=True)

    async def get_record(self, blog_id: UUID) -> BlogRecord | None:
        """Load one post with its joins, without touching the view counter."""
        # pyrefly: ignore [bad-argument-type]
        result = await self.session.execute(self._select_records([BlogDB.id == blog_id]))
        row = result.first()
        return to_record(row) if row else None

    async def get_by_slug(self, slug: str) -> BlogRecord | None:
        """
        Load a post by slug and count the view.

        The counter is bumped with a single ``UPDATE ... SET view_count =
        view_count + 1`` so concurrent reads never lose an increment. The
        returned record carries the incremented count.
        """
        statement = (
            update(BlogDB)
            # pyrefly: ignore [bad-argument-type]
            .where(BlogDB.slug == slug)
            .values(view_count=BlogDB.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            return None

        # pyrefly: ignore [bad-argument-type]
        result = await self.session.execute(self._select_records([BlogDB.slug == slug]))
        row = result.first()
        return to_record(row) if row else None

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        return await self._check_exists_by_field("slug", slug, exclude_id=exclude_id)

    async def update(self, blog: BlogDB, changes: dict[str, Any]) -> BlogDB:
        """Write ``changes`` onto ``blog`` and refresh ``updated_at``."""
        for key, value in changes.items():
            setattr(blog, key, value)
        blog.updated_at = datetime.now(tz=UTC)
        return await self._add_and_refresh(blog)

    async def delete(self, blog: BlogDB) -> None:
        """Delete a post together with its likes."""
        # pyrefly: ignore [bad-argument-type]
        await self.session.execute(delete(BlogLikeDB).where(BlogLikeDB.blog_id == blog.id))
        await self.session.delete(blog)
        await self.session.flush()

    def likes(self, blog_id: UUID) -> LikeSet:
        return LikeSet(self.session, blog_id)

    async def _aggregate(
        self,
        conditions: Sequence[ColumnElement[bool]],
        *,
        by_status: bool = False,
    ) -> Sequence[Row[Any]]:
        totals = like_totals()
        columns: list[Any] = [
            func.count(BlogDB.id).label("total_blogs"),
            cast(func.coalesce(func.sum(BlogDB.view_count), 0), Integer).label("total_views"),
            cast(
                func.coalesce(func.sum(func.coalesce(totals.c.likes_count, 0)), 0),
                Integer,
            ).label("total_likes"),
        ]
        if by_status:
            columns.insert(0, BlogDB.status)

        statement = (
            select(*columns)
            .select_from(BlogDB)
            .outerjoin(totals, totals.c.blog_id == BlogDB.id)
            .where(*conditions)
        )
        if by_status:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.group_by(BlogDB.status).order_by(BlogDB.status)

        result = await self.session.execute(statement)
        return result.all()

    async def stats_by_author(self, author_id: UUID) -> AuthorStats:
        """
        Totals over every post of ``author_id`` (any status).

        Returns:
            AuthorStats: Counts plus the author's posts, newest first.
            Totals are zero when the author has no posts.
        """
        # pyrefly: ignore [bad-argument-type]
        conditions = [BlogDB.author_id == author_id]
        rows = await self._aggregate(conditions)
        total_blogs, total_views, total_likes = rows[0]

        result = await self.session.execute(self._select_records(conditions))
        blogs = [to_record(row) for row in result.all()]

        return AuthorStats(
            total_blogs=total_blogs or 0,
            total_views=total_views or 0,
            total_likes=total_likes or 0,
            blogs=blogs,
        )

    async def stats_global(self) -> list[StatusStats]:
        """The same totals as ``stats_by_author`` grouped by status across all posts."""
        rows = await self._aggregate([], by_status=True)
        return [
            StatusStats(
                status=status,
                total_blogs=total_blogs,
                total_views=total_views or 0,
                total_likes=total_likes or 0,
            )
            for status, total_blogs, total_views, total_likes in rows
        ]
