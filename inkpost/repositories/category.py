"""Category repository for database operations."""

from sqlalchemy import select

from inkpost.models.category import CategoryDB
from inkpost.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryDB]):
    """Repository for Category database operations."""

    model = CategoryDB
    duplicate_detail = "Category already exists"

    async def list_all(self) -> list[CategoryDB]:
        """Return every category ordered by name."""
        # pyrefly: ignore [bad-argument-type]
        result = await self.session.execute(select(CategoryDB).order_by(CategoryDB.name))
        return list(result.scalars().all())

    async def exists_by_name_or_slug(self, name: str, slug: str) -> bool:
        return await self._check_exists_by_field(
            "name",
            name,
        ) or await self._check_exists_by_field("slug", slug)
