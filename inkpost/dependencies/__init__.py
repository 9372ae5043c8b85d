from inkpost.dependencies.dependencies import (
    AdminDep,
    AuthorDep,
    AuthServiceDep,
    BlogRepoDep,
    BlogServiceDep,
    CategoryRepoDep,
    CurrentUserDep,
    SessionDep,
    UserRepoDep,
    get_current_user,
    oauth2_scheme,
    require_role,
)

__all__ = [
    "AdminDep",
    "AuthServiceDep",
    "AuthorDep",
    "BlogRepoDep",
    "BlogServiceDep",
    "CategoryRepoDep",
    "CurrentUserDep",
    "SessionDep",
    "UserRepoDep",
    "get_current_user",
    "oauth2_scheme",
    "require_role",
]
