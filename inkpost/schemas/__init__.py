from inkpost.schemas.auth import Token, TokenData
from inkpost.schemas.blog import (
    AuthorResponse,
    AuthorStatsEnvelope,
    BlogCreate,
    BlogDataEnvelope,
    BlogEnvelope,
    BlogListEnvelope,
    BlogResponse,
    BlogSearchEnvelope,
    BlogUpdate,
    CategoryRef,
    GlobalStatsEnvelope,
    LikeToggleResponse,
    MessageEnvelope,
    StatsSummary,
    StatusStatsResponse,
)
from inkpost.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryResponse,
)
from inkpost.schemas.health import HealthCheckResponse
from inkpost.schemas.user import ChangeRoleRequest, UserCreate, UserEnvelope, UserResponse

__all__ = [
    "AuthorResponse",
    "AuthorStatsEnvelope",
    "BlogCreate",
    "BlogDataEnvelope",
    "BlogEnvelope",
    "BlogListEnvelope",
    "BlogResponse",
    "BlogSearchEnvelope",
    "BlogUpdate",
    "CategoryCreate",
    "CategoryEnvelope",
    "CategoryListEnvelope",
    "CategoryRef",
    "CategoryResponse",
    "ChangeRoleRequest",
    "GlobalStatsEnvelope",
    "HealthCheckResponse",
    "LikeToggleResponse",
    "MessageEnvelope",
    "StatsSummary",
    "StatusStatsResponse",
    "Token",
    "TokenData",
    "UserCreate",
    "UserEnvelope",
    "UserResponse",
]
