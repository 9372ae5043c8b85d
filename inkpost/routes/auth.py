"""Authentication routes for handling user login, registration and roles."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from inkpost.dependencies import AdminDep, AuthServiceDep, CurrentUserDep
from inkpost.managers import limiter
from inkpost.models import UserDB
from inkpost.schemas.auth import Token
from inkpost.schemas.user import ChangeRoleRequest, UserCreate, UserEnvelope, UserResponse
from inkpost.utils.helpers import format_datetime, respond

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])

USER_EXAMPLE = {
    "success": True,
    "user": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "username": "ayu",
        "email": "ayu@example.com",
        "name": "Ayu",
        "role": "reader",
        "createdAt": "2025-01-01 08:00:00",
    },
}


def user_to_response(user: UserDB) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=format_datetime(user.created_at),
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=Token,
    summary="Login for access token",
    description="Authenticate user with username/email and password to obtain an access token.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                    },
                },
            },
        },
        401: {
            "description": "Unauthorized",
            "content": {
                "application/json": {
                    "example": {"success": False, "message": "Invalid username or password"},
                },
            },
        },
    },
    operation_id="auth_login",
)
@limiter.limit("5/minute")
async def login_for_access_token(
    request: Request,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Login with username (or email) and password.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    form_data : OAuth2PasswordRequestForm
        Form data containing username and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    ORJSONResponse
        Access token envelope.

    Raises
    ------
    InvalidCredentialsError
        If authentication fails.
    """
    user = await auth_service.authenticate_user(form_data.username, form_data.password)
    return respond(auth_service.create_token_for_user(user))


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Register a new reader account.",
    responses={
        201: {"content": {"application/json": {"example": USER_EXAMPLE}}},
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "Username or email already registered",
                    },
                },
            },
        },
    },
    operation_id="auth_register",
)
@limiter.limit("5/hour")
async def register_user(
    request: Request,
    response: Response,
    user_create: UserCreate,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    user_create : UserCreate
        User registration data.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    ORJSONResponse
        Created user information.

    Raises
    ------
    DuplicateEntryError
        If the username or email is already taken.
    """
    user = await auth_service.register(user_create)
    return respond(UserEnvelope(user=user_to_response(user)), HTTP_201_CREATED)


@router.get(
    "/profile",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Current user profile",
    responses={200: {"content": {"application/json": {"example": USER_EXAMPLE}}}},
    operation_id="auth_profile",
)
@limiter.limit("30/minute")
async def get_profile(
    request: Request,
    response: Response,
    user: CurrentUserDep,
) -> ORJSONResponse:
    return respond(UserEnvelope(user=user_to_response(user)))


@router.put(
    "/change-role",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Change a user's role",
    description="Admin only. Roles are reader, author and admin.",
    responses={
        404: {
            "description": "Not found",
            "content": {
                "application/json": {"example": {"success": False, "message": "User not found"}},
            },
        },
    },
    operation_id="auth_change_role",
)
@limiter.limit("10/minute")
async def change_role(
    request: Request,
    response: Response,
    body: ChangeRoleRequest,
    admin: AdminDep,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    user = await auth_service.change_role(body.user_id, body.role)
    return respond(UserEnvelope(user=user_to_response(user)))
