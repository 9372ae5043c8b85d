"""Application dependencies: sessions, repositories, services and identity."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.db import get_session
from inkpost.errors import ForbiddenError, InvalidTokenError
from inkpost.managers.token_manager import decode_access_token
from inkpost.models import UserDB
from inkpost.rabc import Role
from inkpost.repositories import BlogRepository, CategoryRepository, UserRepository
from inkpost.services import AuthService, BlogService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_repository(session: SessionDep) -> UserRepository:
    return UserRepository(session)


def get_category_repository(session: SessionDep) -> CategoryRepository:
    return CategoryRepository(session)


def get_blog_repository(session: SessionDep) -> BlogRepository:
    return BlogRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
CategoryRepoDep = Annotated[CategoryRepository, Depends(get_category_repository)]
BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]


def get_auth_service(repo: UserRepoDep) -> AuthService:
    return AuthService(repo)


def get_blog_service(repo: BlogRepoDep, categories: CategoryRepoDep) -> BlogService:
    return BlogService(repo, categories)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    repo: UserRepoDep,
) -> UserDB:
    """
    Resolve the authenticated user from the bearer token.

    Parameters
    ----------
    token : str
        Bearer token.
    repo : UserRepository
        User repository bound to the request session.

    Returns
    -------
    UserDB
        Current authenticated user.

    Raises
    ------
    InvalidTokenError
        If the token is invalid or its user no longer exists.
    """
    token_data = decode_access_token(token)
    if not token_data:
        raise InvalidTokenError

    user = await repo.get_by_id(token_data.user_id)
    if not user:
        raise InvalidTokenError("User not found")

    return user


CurrentUserDep = Annotated[UserDB, Depends(get_current_user)]


def require_role(roles: list[str]) -> Callable[..., Awaitable[UserDB]]:
    """
    Create a dependency that requires one of ``roles``.

    Example:
        @router.get("/admin-only")
        async def admin_route(user: Annotated[UserDB, Depends(require_role(["admin"]))]):
            ...
    """

    async def role_checker(user: CurrentUserDep) -> UserDB:
        if user.role not in roles:
            raise ForbiddenError(f"Insufficient permissions. Required role: {', '.join(roles)}")
        return user

    return role_checker


AdminDep = Annotated[UserDB, Depends(require_role([Role.ADMIN]))]
AuthorDep = Annotated[UserDB, Depends(require_role([Role.ADMIN, Role.AUTHOR]))]
