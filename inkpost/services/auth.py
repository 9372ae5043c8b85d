"""Authentication service: registration, login and role management."""

from datetime import timedelta
from uuid import UUID

from inkpost.configs import settings
from inkpost.errors import DuplicateEntryError, InvalidCredentialsError, UserNotFoundError
from inkpost.managers.password_manager import hash_password, verify_password
from inkpost.managers.token_manager import create_access_token
from inkpost.models import UserDB
from inkpost.monitoring import get_logger
from inkpost.rabc import Role
from inkpost.repositories import UserRepository
from inkpost.schemas.auth import Token
from inkpost.schemas.user import UserCreate

logger = get_logger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register(self, payload: UserCreate) -> UserDB:
        """
        Register a new user with the ``reader`` role.

        Raises:
            DuplicateEntryError: If the username or email is taken
        """
        if await self.user_repo.exists_by_username_or_email(payload.username, payload.email):
            raise DuplicateEntryError(detail=self.user_repo.duplicate_detail)

        user = UserDB(
            username=payload.username,
            email=payload.email,
            name=payload.name,
            password_hash=await hash_password(payload.password.get_secret_value()),
            role=Role.READER,
        )
        user = await self.user_repo.add(user)
        logger.info("User registered", user_id=str(user.id))
        return user

    async def authenticate_user(self, username_or_email: str, password: str | None) -> UserDB:
        """
        Authenticate a user by username or email and password.

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        user = await self.user_repo.get_by_login(username_or_email)
        # A missing user still runs a dummy verification
        valid = bool(password) and await verify_password(
            password or "",
            user.password_hash if user else None,
        )
        if user is None or not valid:
            raise InvalidCredentialsError
        return user

    def create_token_for_user(self, user: UserDB) -> Token:
        access_token = create_access_token(
            user_id=user.id,
            username=user.username,
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return Token(access_token=access_token, token_type="bearer")

    async def change_role(self, user_id: UUID, role: str) -> UserDB:
        """
        Change a user's role.

        Raises:
            UserNotFoundError: If no user has ``user_id``
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError
        user = await self.user_repo.set_role(user, role)
        logger.info("User role changed", user_id=str(user.id), role=role)
        return user
