# tests/routes/test_blog_routes.py
"""HTTP tests for the /blogs endpoints."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from inkpost.configs import settings
from inkpost.models import BlogDB, CategoryDB, UserDB

type BlogFactory = Callable[..., Awaitable[BlogDB]]


class TestCreateBlog:
    """Tests for POST /blogs."""

    @pytest.mark.asyncio
    async def test_author_creates_blog(
        self,
        client: AsyncClient,
        author_user: UserDB,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Hello World", "content": "First post", "tags": ["Bali", "travel"]},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Blog created successfully"
        blog = body["blog"]
        assert blog["slug"] == "hello-world"
        assert blog["status"] == "draft"
        assert blog["tags"] == ["bali", "travel"]
        assert blog["views"] == 0
        assert blog["likesCount"] == 0
        assert blog["coverImage"] is None
        assert blog["category"] is None
        assert blog["author"] == {
            "id": str(author_user.id),
            "username": "ayu",
            "name": "Ayu Lestari",
        }
        assert "createdAt" in blog

    @pytest.mark.asyncio
    async def test_published_with_category(
        self,
        client: AsyncClient,
        category: CategoryDB,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={
                "title": "Ubud Guide",
                "content": "Rice fields",
                "status": "published",
                "category": str(category.id),
                "tags": "ubud, bali",
            },
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        blog = response.json()["blog"]
        assert blog["status"] == "published"
        assert blog["category"] == {"id": str(category.id), "name": "Travel"}
        assert blog["tags"] == ["ubud", "bali"]

    @pytest.mark.asyncio
    async def test_missing_fields_report_field_errors(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post("/blogs", data={"tags": "x"}, headers=author_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"title", "content"}

    @pytest.mark.asyncio
    async def test_invalid_status(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Odd", "content": "Body", "status": "archived"},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "status"

    @pytest.mark.asyncio
    async def test_reader_is_forbidden(
        self,
        client: AsyncClient,
        reader_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Reader Post", "content": "Body"},
            headers=reader_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {
            "success": False,
            "message": "Only authors and admins can create blogs",
        }

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.post("/blogs", data={"title": "Anon", "content": "Body"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Anon", "content": "Body"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {
            "success": False,
            "message": "Could not validate credentials",
        }

    @pytest.mark.asyncio
    async def test_duplicate_title(
        self,
        client: AsyncClient,
        author_user: UserDB,
        author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Taken Title")

        response = await client.post(
            "/blogs",
            data={"title": "Taken Title", "content": "Again"},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "A blog with this title already exists"

    @pytest.mark.asyncio
    async def test_unknown_category(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Lost", "content": "Body", "category": str(uuid4())},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"] == [
            {"field": "category", "message": "Category does not exist", "type": "value_error"},
        ]

    @pytest.mark.asyncio
    async def test_with_cover_image(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Covered", "content": "Body"},
            files={"image": ("cover.png", valid_png_bytes, "image/png")},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        cover = response.json()["blog"]["coverImage"]
        assert cover.startswith("/uploads/blog_covers/")
        filename = cover.rsplit("/", 1)[-1]
        assert (settings.UPLOADS_DIR / "blog_covers" / filename).exists()

    @pytest.mark.asyncio
    async def test_unsupported_cover_type(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Gif Cover", "content": "Body"},
            files={"image": ("cover.gif", b"GIF89a", "image/gif")},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        body = response.json()
        assert body["success"] is False
        assert body["allowed_types"] == ["image/jpeg", "image/png", "image/webp"]

    @pytest.mark.asyncio
    async def test_corrupt_cover_image(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/blogs",
            data={"title": "Broken Cover", "content": "Body"},
            files={"image": ("cover.png", b"definitely not a png", "image/png")},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestListBlogs:
    """Tests for GET /blogs."""

    @pytest.mark.asyncio
    async def test_lists_published_newest_first(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Older")
        await make_blog(author_user, "Secret", status="draft")
        await make_blog(author_user, "Newer")

        response = await client.get("/blogs")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["page"] == 1
        assert body["count"] == 2
        assert "total" not in body
        assert [b["title"] for b in body["blogs"]] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_pagination_and_total(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        for i in range(5):
            await make_blog(author_user, f"Post {i}")

        response = await client.get("/blogs", params={"page": 2, "limit": 2, "includeTotal": True})

        body = response.json()
        assert body["page"] == 2
        assert body["count"] == 2
        assert body["total"] == 5
        assert [b["title"] for b in body["blogs"]] == ["Post 2", "Post 1"]

    @pytest.mark.asyncio
    async def test_bad_paging_values_use_defaults(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Only One")

        response = await client.get("/blogs", params={"page": "abc", "limit": "-3"})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["page"] == 1
        assert body["count"] == 1

    @pytest.mark.asyncio
    async def test_search_and_category_filters(
        self,
        client: AsyncClient,
        author_user: UserDB,
        category: CategoryDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Bali Beaches", category=category)
        await make_blog(author_user, "Bali Food")
        await make_blog(author_user, "Java Trains", category=category)

        by_title = await client.get("/blogs", params={"search": "bali"})
        by_both = await client.get(
            "/blogs",
            params={"search": "bali", "category": str(category.id)},
        )
        bad_category = await client.get("/blogs", params={"category": "nope"})

        assert {b["title"] for b in by_title.json()["blogs"]} == {"Bali Beaches", "Bali Food"}
        assert [b["title"] for b in by_both.json()["blogs"]] == ["Bali Beaches"]
        assert bad_category.json()["count"] == 3

    @pytest.mark.asyncio
    async def test_empty(self, client: AsyncClient) -> None:
        response = await client.get("/blogs")

        assert response.json() == {"success": True, "page": 1, "count": 0, "blogs": []}


class TestSearchBlogs:
    """Tests for GET /blogs/search."""

    @pytest.mark.asyncio
    async def test_keyword_tag_and_paging(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Surf Spots", tags=["surf"], content="Waves")
        await make_blog(author_user, "Surf Gear", tags=["surf", "gear"], content="Boards")
        await make_blog(author_user, "Temples", tags=["culture"], content="Surf nearby too")

        response = await client.get(
            "/blogs/search",
            params={"keyword": "surf", "tag": "surf", "limit": 1},
        )

        body = response.json()
        assert body["success"] is True
        assert body["total"] == 2
        assert body["page"] == 1
        assert body["totalPages"] == 2
        assert [b["title"] for b in body["blogs"]] == ["Surf Gear"]

    @pytest.mark.asyncio
    async def test_sort_by_views(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Popular", view_count=40)
        await make_blog(author_user, "Fresh", view_count=2)

        latest = await client.get("/blogs/search")
        by_views = await client.get("/blogs/search", params={"sort": "views"})

        assert [b["title"] for b in latest.json()["blogs"]] == ["Fresh", "Popular"]
        assert [b["title"] for b in by_views.json()["blogs"]] == ["Popular", "Fresh"]

    @pytest.mark.asyncio
    async def test_no_matches(self, client: AsyncClient) -> None:
        response = await client.get("/blogs/search", params={"keyword": "nothing"})

        assert response.json() == {
            "success": True,
            "total": 0,
            "page": 1,
            "totalPages": 0,
            "blogs": [],
        }


class TestGetBlog:
    """Tests for GET /blogs/id/{id} and GET /blogs/{slug}."""

    @pytest.mark.asyncio
    async def test_by_id_does_not_count_views(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "By Id", view_count=7)

        response = await client.get(f"/blogs/id/{blog.id}")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Blog fetched successfully"
        assert body["data"]["id"] == str(blog.id)
        assert body["data"]["views"] == 7

    @pytest.mark.asyncio
    async def test_by_id_unknown(self, client: AsyncClient) -> None:
        response = await client.get(f"/blogs/id/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "message": "Blog not found"}

    @pytest.mark.asyncio
    async def test_by_id_malformed_is_a_server_error(self, client: AsyncClient) -> None:
        response = await client.get("/blogs/id/12345")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"success": False, "error": "Invalid reference format"}

    @pytest.mark.asyncio
    async def test_by_slug_counts_each_view(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Counted Post")

        first = await client.get("/blogs/counted-post")
        second = await client.get("/blogs/counted-post")

        assert first.status_code == status.HTTP_200_OK
        assert "message" not in first.json()
        assert first.json()["blog"]["views"] == 1
        assert second.json()["blog"]["views"] == 2

    @pytest.mark.asyncio
    async def test_by_slug_unknown(self, client: AsyncClient) -> None:
        response = await client.get("/blogs/no-such-post")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUpdateBlog:
    """Tests for PATCH /blogs/{id}."""

    @pytest.mark.asyncio
    async def test_owner_updates_title_and_slug(
        self,
        client: AsyncClient,
        author_user: UserDB,
        author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "First Draft", status="draft")

        response = await client.patch(
            f"/blogs/{blog.id}",
            json={"title": "Final Version", "status": "published", "tags": ["Done"]},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Blog updated successfully"
        assert body["blog"]["slug"] == "final-version"
        assert body["blog"]["status"] == "published"
        assert body["blog"]["tags"] == ["done"]
        assert body["blog"]["updatedAt"] is not None
        assert body["blog"]["author"]["id"] == str(author_user.id)

    @pytest.mark.asyncio
    async def test_other_author_is_forbidden(
        self,
        client: AsyncClient,
        author_user: UserDB,
        other_author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Not Theirs")

        valid = await client.patch(
            f"/blogs/{blog.id}",
            json={"content": "Hijacked"},
            headers=other_author_headers,
        )
        invalid = await client.patch(
            f"/blogs/{blog.id}",
            json={"author": "someone-else", "views": 1000},
            headers=other_author_headers,
        )

        assert valid.status_code == status.HTTP_403_FORBIDDEN
        assert valid.json() == {"success": False, "message": "You can only modify your own blogs"}
        assert invalid.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_other_author_is_forbidden_whatever_the_body(
        self,
        client: AsyncClient,
        author_user: UserDB,
        other_author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Still Not Theirs")
        url = f"/blogs/{blog.id}"
        json_headers = {**other_author_headers, "Content-Type": "application/json"}

        responses = [
            await client.patch(url, headers=other_author_headers),
            await client.patch(url, json=["content", "Hijacked"], headers=other_author_headers),
            await client.patch(url, content=b"{not json", headers=json_headers),
        ]

        assert [r.status_code for r in responses] == [status.HTTP_403_FORBIDDEN] * 3
        assert all(r.json()["message"] == "You can only modify your own blogs" for r in responses)

    @pytest.mark.asyncio
    async def test_owner_without_body_gets_validation_error(
        self,
        client: AsyncClient,
        author_user: UserDB,
        author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Empty Patch")

        response = await client.patch(f"/blogs/{blog.id}", headers=author_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["success"] is False
        assert body["errors"]

    @pytest.mark.asyncio
    async def test_admin_updates_any_post(
        self,
        client: AsyncClient,
        author_user: UserDB,
        admin_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Needs Edit")

        response = await client.patch(
            f"/blogs/{blog.id}",
            json={"content": "Edited by admin"},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["blog"]["content"] == "Edited by admin"
        assert response.json()["blog"]["author"]["id"] == str(author_user.id)

    @pytest.mark.asyncio
    async def test_reader_is_forbidden(
        self,
        client: AsyncClient,
        author_user: UserDB,
        reader_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Read Only")

        response = await client.patch(
            f"/blogs/{blog.id}",
            json={"content": "Nope"},
            headers=reader_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_owner_cannot_change_author(
        self,
        client: AsyncClient,
        author_user: UserDB,
        other_author: UserDB,
        author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Mine Forever")

        response = await client.patch(
            f"/blogs/{blog.id}",
            json={"author": str(other_author.id)},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "author"

    @pytest.mark.asyncio
    async def test_unknown_blog(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.patch(
            f"/blogs/{uuid4()}",
            json={"content": "Ghost"},
            headers=author_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteBlog:
    """Tests for DELETE /blogs/{id}."""

    @pytest.mark.asyncio
    async def test_owner_deletes(
        self,
        client: AsyncClient,
        author_user: UserDB,
        author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Temporary")

        response = await client.delete(f"/blogs/{blog.id}", headers=author_headers)
        follow_up = await client.get(f"/blogs/id/{blog.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Blog deleted successfully"}
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_author_is_forbidden(
        self,
        client: AsyncClient,
        author_user: UserDB,
        other_author_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Keep Out")

        response = await client.delete(f"/blogs/{blog.id}", headers=other_author_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_deletes_any_post(
        self,
        client: AsyncClient,
        author_user: UserDB,
        admin_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Removed By Admin")

        response = await client.delete(f"/blogs/{blog.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK


class TestToggleLike:
    """Tests for PUT /blogs/like/{id}."""

    @pytest.mark.asyncio
    async def test_like_and_unlike(
        self,
        client: AsyncClient,
        author_user: UserDB,
        reader_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Likeable")

        liked = await client.put(f"/blogs/like/{blog.id}", headers=reader_headers)
        listed = await client.get("/blogs")
        unliked = await client.put(f"/blogs/like/{blog.id}", headers=reader_headers)

        assert liked.json() == {"success": True, "liked": True, "totalLikes": 1}
        assert listed.json()["blogs"][0]["likesCount"] == 1
        assert unliked.json() == {"success": True, "liked": False, "totalLikes": 0}

    @pytest.mark.asyncio
    async def test_requires_authentication(
        self,
        client: AsyncClient,
        author_user: UserDB,
        make_blog: BlogFactory,
    ) -> None:
        blog = await make_blog(author_user, "Anonymous Like")

        response = await client.put(f"/blogs/like/{blog.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_unknown_blog(
        self,
        client: AsyncClient,
        reader_headers: dict[str, str],
    ) -> None:
        response = await client.put(f"/blogs/like/{uuid4()}", headers=reader_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestStats:
    """Tests for GET /blogs/author/me and GET /blogs/admin/stats."""

    @pytest.mark.asyncio
    async def test_author_stats(
        self,
        client: AsyncClient,
        author_user: UserDB,
        other_author: UserDB,
        author_headers: dict[str, str],
        reader_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        published = await make_blog(author_user, "Mine Live", view_count=10)
        await make_blog(author_user, "Mine Draft", status="draft", view_count=1)
        await make_blog(other_author, "Someone Else", view_count=50)
        await client.put(f"/blogs/like/{published.id}", headers=reader_headers)

        response = await client.get("/blogs/author/me", headers=author_headers)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["stats"] == {"totalBlogs": 2, "totalViews": 11, "totalLikes": 1}
        assert [b["title"] for b in body["blogs"]] == ["Mine Draft", "Mine Live"]

    @pytest.mark.asyncio
    async def test_author_stats_forbidden_for_readers(
        self,
        client: AsyncClient,
        reader_headers: dict[str, str],
    ) -> None:
        response = await client.get("/blogs/author/me", headers=reader_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_stats(
        self,
        client: AsyncClient,
        author_user: UserDB,
        admin_headers: dict[str, str],
        make_blog: BlogFactory,
    ) -> None:
        await make_blog(author_user, "Live One", view_count=3)
        await make_blog(author_user, "Live Two", view_count=4)
        await make_blog(author_user, "Unfinished", status="draft")

        response = await client.get("/blogs/admin/stats", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["stats"] == [
            {"status": "draft", "totalBlogs": 1, "totalViews": 0, "totalLikes": 0},
            {"status": "published", "totalBlogs": 2, "totalViews": 7, "totalLikes": 0},
        ]

    @pytest.mark.asyncio
    async def test_admin_stats_forbidden_for_authors(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.get("/blogs/admin/stats", headers=author_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["success"] is False
