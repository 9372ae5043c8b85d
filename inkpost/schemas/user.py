"""
User schemas for registration, profile and role management.

Request bodies accept both snake_case and camelCase keys; responses are
serialized with camelCase aliases.
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

type RoleName = Literal["reader", "author", "admin"]


class UserCreate(BaseModel):
    """User registration payload."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Username",
        examples=["ayu"],
    )
    email: EmailStr = Field(..., description="Email address", examples=["ayu@example.com"])
    password: SecretStr = Field(
        ...,
        min_length=8,
        description="Password",
        examples=["Password123"],
    )
    name: str | None = Field(default=None, max_length=100, description="Display name")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Usernames are alphanumeric with underscores, dots or hyphens."""
        if not all(ch.isalnum() or ch in "_.-" for ch in v):
            mssg = "Username may only contain letters, digits, '_', '.' or '-'"
            raise ValueError(mssg)
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class UserResponse(BaseModel):
    """User response model (never includes the password hash)."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    username: str
    email: str
    name: str | None = None
    role: str
    created_at: str | None = Field(default=None, alias="createdAt")


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class ChangeRoleRequest(BaseModel):
    """Admin request to change another user's role."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(..., alias="userId", description="Target user ID")
    role: RoleName = Field(..., description="New role", examples=["author"])
