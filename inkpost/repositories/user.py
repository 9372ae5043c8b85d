"""User repository for database operations."""

from datetime import UTC, datetime

from sqlalchemy import func, or_, select

from inkpost.models.user import UserDB
from inkpost.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """Repository for User database operations."""

    model = UserDB
    duplicate_detail = "Username or email already registered"

    async def get_by_login(self, login: str) -> UserDB | None:
        """
        Resolve a login name that may be either a username or an email.

        Args:
            login: Username or email address

        Returns:
            UserDB | None: Matching user, if any
        """
        statement = select(UserDB).where(
            # pyrefly: ignore [bad-argument-type]
            or_(UserDB.username == login, func.lower(UserDB.email) == login.lower()),
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        return await self._check_exists_by_field(
            "username",
            username,
        ) or await self._check_exists_by_field("email", email.lower())

    async def set_role(self, user: UserDB, role: str) -> UserDB:
        user.role = role
        user.updated_at = datetime.now(tz=UTC)
        return await self._add_and_refresh(user)
