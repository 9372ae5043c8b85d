# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read on import, so the environment must be in place before
# anything from inkpost is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-inkpost"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="inkpost-uploads-")
os.environ["LOG_TO_FILE"] = "false"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from io import BytesIO  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from inkpost.db import get_session  # noqa: E402
from inkpost.main import app  # noqa: E402
from inkpost.managers.rate_limiter import limiter  # noqa: E402
from inkpost.managers.token_manager import create_access_token  # noqa: E402
from inkpost.models import BlogDB, CategoryDB, UserDB  # noqa: E402
from inkpost.rabc import Role  # noqa: E402
from inkpost.utils.helpers import slugify  # noqa: E402

# Seeded users never log in with a password, so a placeholder hash will do
PLACEHOLDER_HASH = "$argon2id$v=19$m=8192,t=1,p=1$c29tZXNhbHQ$c29tZWhhc2g"
BASE_TIME = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)

type BlogFactory = Callable[..., Awaitable[BlogDB]]


def make_user(username: str, role: str, name: str | None = None) -> UserDB:
    return UserDB(
        username=username,
        email=f"{username}@example.com",
        password_hash=PLACEHOLDER_HASH,
        name=name,
        role=role,
    )


def auth_headers_for(user: UserDB) -> dict[str, str]:
    """Bearer headers carrying a fresh access token for ``user``."""
    token = create_access_token(
        user_id=user.id,
        username=user.username,
        expires_delta=timedelta(minutes=30),
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with the full schema."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session shared by the test body and the application under test."""
    maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with maker() as db_session:
        yield db_session


@pytest.fixture
async def admin_user(session: AsyncSession) -> UserDB:
    user = make_user("admin", Role.ADMIN, "Site Admin")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def author_user(session: AsyncSession) -> UserDB:
    user = make_user("ayu", Role.AUTHOR, "Ayu Lestari")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def other_author(session: AsyncSession) -> UserDB:
    user = make_user("wayan", Role.AUTHOR)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def reader_user(session: AsyncSession) -> UserDB:
    user = make_user("reader", Role.READER, "Casual Reader")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user: UserDB) -> dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def author_headers(author_user: UserDB) -> dict[str, str]:
    return auth_headers_for(author_user)


@pytest.fixture
def other_author_headers(other_author: UserDB) -> dict[str, str]:
    return auth_headers_for(other_author)


@pytest.fixture
def reader_headers(reader_user: UserDB) -> dict[str, str]:
    return auth_headers_for(reader_user)


@pytest.fixture
async def category(session: AsyncSession) -> CategoryDB:
    travel = CategoryDB(name="Travel", slug="travel")
    session.add(travel)
    await session.commit()
    return travel


@pytest.fixture
def make_blog(session: AsyncSession) -> BlogFactory:
    """
    Factory inserting blogs directly.

    Each call is one minute newer than the previous one so ordering by
    ``created_at`` is deterministic.
    """
    minutes = count()

    async def factory(
        author: UserDB,
        title: str,
        *,
        status: str = "published",
        content: str | None = None,
        tags: list[str] | None = None,
        category: CategoryDB | None = None,
        view_count: int = 0,
    ) -> BlogDB:
        blog = BlogDB(
            title=title,
            slug=slugify(title),
            content=content or f"Content of {title}",
            author_id=author.id,
            category_id=category.id if category else None,
            tags=tags or [],
            status=status,
            view_count=view_count,
            created_at=BASE_TIME + timedelta(minutes=next(minutes)),
        )
        session.add(blog)
        await session.commit()
        return blog

    return factory


@pytest.fixture
async def client(session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client bound to the test session."""

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        yield session
        await session.commit()

    app.dependency_overrides[get_session] = override_get_session
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (64, 64), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (64, 64), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()
