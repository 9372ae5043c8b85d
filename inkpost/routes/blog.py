# inkpost/routes/blog.py

"""
Blog Routes.

Summary
-------
Endpoints include:
  - Create blog (multipart, optional cover image)
  - List published blogs
  - Search published blogs
  - Get blog by id
  - Author statistics and global statistics
  - Toggle like
  - Update / delete blog
  - Get blog by slug (counts a view)

``GET /blogs/{slug}`` is registered last so it does not shadow the
fixed paths above it.

Rate Limiting
-------------
Tiered limits apply when `X-API-Key` is present, offering higher
throughput for identified clients.
"""

from typing import Annotated, Any

import orjson
from fastapi import APIRouter, File, Form, Query, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from inkpost.dependencies import (
    AdminDep,
    AuthorDep,
    BlogServiceDep,
    CurrentUserDep,
)
from inkpost.errors import validate_payload
from inkpost.managers import limiter, tiered_limit
from inkpost.repositories import BlogRecord, PageWindow
from inkpost.schemas.blog import (
    AuthorResponse,
    AuthorStatsEnvelope,
    BlogCreate,
    BlogDataEnvelope,
    BlogEnvelope,
    BlogListEnvelope,
    BlogResponse,
    BlogSearchEnvelope,
    CategoryRef,
    GlobalStatsEnvelope,
    LikeToggleResponse,
    MessageEnvelope,
    StatsSummary,
    StatusStatsResponse,
)
from inkpost.utils.helpers import format_datetime, respond

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

READ_LIMIT = tiered_limit("120/minute", "60/minute")
WRITE_LIMIT = tiered_limit("30/minute", "10/minute")

NOT_FOUND_EXAMPLE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"success": False, "message": "Blog not found"}}},
}
FORBIDDEN_EXAMPLE = {
    "description": "Forbidden",
    "content": {
        "application/json": {
            "example": {"success": False, "message": "You can only modify your own blogs"},
        },
    },
}

UPDATE_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {"type": "object"},
                "examples": {
                    "publish": {"value": {"status": "published"}},
                    "retitle": {"value": {"title": "Hello Again", "tags": ["news"]}},
                },
            },
        },
    },
}

PageParam = Annotated[str | None, Query(description="Page number (1-based)")]
LimitParam = Annotated[str | None, Query(description="Page size (max 100)")]


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON without validating it.

    An empty or undecodable body yields None, which the update path
    rejects only after the ownership check.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None


def to_response(record: BlogRecord) -> BlogResponse:
    """
    Convert a joined `BlogRecord` into the public `BlogResponse`.

    Parameters
    ----------
    record : BlogRecord
        Blog with author, category and like count.

    Returns
    -------
    BlogResponse
        Response model; the author carries no sensitive fields.
    """
    blog, author, category = record.blog, record.author, record.category
    return BlogResponse(
        id=blog.id,
        title=blog.title,
        slug=blog.slug,
        content=blog.content,
        author=AuthorResponse(id=author.id, username=author.username, name=author.display_name),
        category=CategoryRef(id=category.id, name=category.name) if category else None,
        tags=list(blog.tags or []),
        status=blog.status,
        cover_image=blog.cover_image,
        views=blog.view_count,
        likes_count=record.likes_count,
        created_at=format_datetime(blog.created_at) or "",
        updated_at=format_datetime(blog.updated_at),
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create a new blog post",
    description="Create a blog post from multipart form fields with an optional cover image.",
    responses={
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "Only authors and admins can create blogs",
                    },
                },
            },
        },
        409: {
            "description": "Duplicate title",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "A blog with this title already exists",
                    },
                },
            },
        },
    },
    operation_id="blogs_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_blog(
    request: Request,
    response: Response,
    service: BlogServiceDep,
    user: CurrentUserDep,
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    tags: Annotated[list[str] | None, Form()] = None,
    status: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File(description="Cover image")] = None,
) -> ORJSONResponse:
    """
    Create a new blog post.

    Missing title or content yields a 422 with field-level messages; the
    slug is derived from the title and the post starts as a draft unless
    a status is given.
    """
    fields = {
        "title": title,
        "content": content,
        "category": category,
        "tags": tags,
        "status": status,
    }
    payload = validate_payload(BlogCreate, {k: v for k, v in fields.items() if v is not None})
    record = await service.create(user, payload, image)
    return respond(
        BlogEnvelope(message="Blog created successfully", blog=to_response(record)),
        HTTP_201_CREATED,
    )


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    summary="List published blogs",
    description="Newest first. `search` matches titles, `category` filters by category id.",
    operation_id="blogs_list",
)
@limiter.limit(READ_LIMIT)
async def list_blogs(
    request: Request,
    response: Response,
    service: BlogServiceDep,
    page: PageParam = None,
    limit: LimitParam = None,
    search: Annotated[str | None, Query(description="Title substring")] = None,
    category: Annotated[str | None, Query(description="Category ID")] = None,
    include_total: Annotated[
        bool,
        Query(alias="includeTotal", description="Also count all matches"),
    ] = False,
) -> ORJSONResponse:
    window = PageWindow.from_params(page, limit)
    result = await service.list_published(window, search, category, with_total=include_total)
    envelope = BlogListEnvelope(
        page=result.page,
        count=result.count,
        total=result.total,
        blogs=[to_response(r) for r in result.items],
    )
    return respond(envelope, exclude={"total"} if result.total is None else None)


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=BlogSearchEnvelope,
    summary="Search published blogs",
    description=(
        "`keyword` matches title or content, `tag` matches one tag, "
        "`sort` is one of latest (default), views, likes."
    ),
    operation_id="blogs_search",
)
@limiter.limit(READ_LIMIT)
async def search_blogs(
    request: Request,
    response: Response,
    service: BlogServiceDep,
    keyword: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    sort: str | None = None,
    page: PageParam = None,
    limit: LimitParam = None,
) -> ORJSONResponse:
    window = PageWindow.from_params(page, limit)
    result = await service.search(window, keyword, category, tag, sort)
    return respond(
        BlogSearchEnvelope(
            total=result.total or 0,
            page=result.page,
            total_pages=result.total_pages,
            blogs=[to_response(r) for r in result.items],
        ),
    )


@router.get(
    "/id/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogDataEnvelope,
    summary="Get blog by ID",
    description="Retrieve a blog post by id. Does not count a view.",
    responses={404: NOT_FOUND_EXAMPLE},
    operation_id="blogs_get_by_id",
)
@limiter.limit(READ_LIMIT)
async def get_blog_by_id(
    request: Request,
    response: Response,
    blog_id: str,
    service: BlogServiceDep,
) -> ORJSONResponse:
    record = await service.get_by_id(blog_id)
    return respond(BlogDataEnvelope(message="Blog fetched successfully", data=to_response(record)))


@router.get(
    "/author/me",
    response_class=ORJSONResponse,
    response_model=AuthorStatsEnvelope,
    summary="Statistics for the current author",
    description="Totals and every post (any status) of the authenticated author.",
    operation_id="blogs_author_stats",
)
@limiter.limit(READ_LIMIT)
async def get_my_stats(
    request: Request,
    response: Response,
    service: BlogServiceDep,
    user: AuthorDep,
) -> ORJSONResponse:
    stats = await service.author_stats(user)
    return respond(
        AuthorStatsEnvelope(
            stats=StatsSummary(
                total_blogs=stats.total_blogs,
                total_views=stats.total_views,
                total_likes=stats.total_likes,
            ),
            blogs=[to_response(r) for r in stats.blogs],
        ),
    )


@router.get(
    "/admin/stats",
    response_class=ORJSONResponse,
    response_model=GlobalStatsEnvelope,
    summary="Global statistics by status",
    operation_id="blogs_admin_stats",
)
@limiter.limit(READ_LIMIT)
async def get_global_stats(
    request: Request,
    response: Response,
    service: BlogServiceDep,
    admin: AdminDep,
) -> ORJSONResponse:
    rows = await service.global_stats()
    return respond(
        GlobalStatsEnvelope(
            stats=[
                StatusStatsResponse(
                    status=row.status,
                    total_blogs=row.total_blogs,
                    total_views=row.total_views,
                    total_likes=row.total_likes,
                )
                for row in rows
            ],
        ),
    )


@router.put(
    "/like/{blog_id}",
    response_class=ORJSONResponse,
    response_model=LikeToggleResponse,
    summary="Like or unlike a blog",
    responses={404: NOT_FOUND_EXAMPLE},
    operation_id="blogs_toggle_like",
)
@limiter.limit(WRITE_LIMIT)
async def toggle_like(
    request: Request,
    response: Response,
    blog_id: str,
    service: BlogServiceDep,
    user: CurrentUserDep,
) -> ORJSONResponse:
    result = await service.toggle_like(user, blog_id)
    return respond(LikeToggleResponse(liked=result.liked, total_likes=result.total_likes))


@router.patch(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Update a blog",
    description="Partial update by the author or an admin. A new title re-derives the slug.",
    responses={403: FORBIDDEN_EXAMPLE, 404: NOT_FOUND_EXAMPLE},
    operation_id="blogs_update",
    openapi_extra=UPDATE_BODY,
)
@limiter.limit(WRITE_LIMIT)
async def update_blog(
    request: Request,
    response: Response,
    blog_id: str,
    service: BlogServiceDep,
    user: AuthorDep,
) -> ORJSONResponse:
    record = await service.update(user, blog_id, await read_json_body(request))
    return respond(
        BlogEnvelope(message="Blog updated successfully", blog=to_response(record)),
    )


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageEnvelope,
    summary="Delete a blog",
    responses={403: FORBIDDEN_EXAMPLE, 404: NOT_FOUND_EXAMPLE},
    operation_id="blogs_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_blog(
    request: Request,
    response: Response,
    blog_id: str,
    service: BlogServiceDep,
    user: AuthorDep,
) -> ORJSONResponse:
    await service.delete(user, blog_id)
    return respond(MessageEnvelope(message="Blog deleted successfully"))


@router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Get blog by slug",
    description="Retrieve a blog post by slug and count one view.",
    responses={404: NOT_FOUND_EXAMPLE},
    operation_id="blogs_get_by_slug",
)
@limiter.limit(READ_LIMIT)
async def get_blog_by_slug(
    request: Request,
    response: Response,
    slug: str,
    service: BlogServiceDep,
) -> ORJSONResponse:
    record = await service.get_by_slug(slug)
    return respond(BlogEnvelope(blog=to_response(record)), exclude={"message"})
