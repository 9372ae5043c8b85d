"""Category routes."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from inkpost.dependencies import AdminDep, CategoryRepoDep
from inkpost.errors import DuplicateEntryError, ValidationError
from inkpost.managers import limiter
from inkpost.models import CategoryDB
from inkpost.monitoring import get_logger
from inkpost.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryResponse,
)
from inkpost.utils.helpers import respond, slugify

logger = get_logger(__name__)

router = APIRouter(prefix="/categories", tags=["🏷️ Categories"])


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryListEnvelope,
    summary="List categories",
    operation_id="categories_list",
)
@limiter.limit("60/minute")
async def list_categories(
    request: Request,
    response: Response,
    repo: CategoryRepoDep,
) -> ORJSONResponse:
    categories = await repo.list_all()
    return respond(
        CategoryListEnvelope(
            categories=[CategoryResponse.model_validate(c) for c in categories],
        ),
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    description="Admin only. The slug is derived from the name.",
    responses={
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"success": False, "message": "Category already exists"},
                },
            },
        },
    },
    operation_id="categories_create",
)
@limiter.limit("10/minute")
async def create_category(
    request: Request,
    response: Response,
    body: CategoryCreate,
    admin: AdminDep,
    repo: CategoryRepoDep,
) -> ORJSONResponse:
    """
    Create a category.

    Raises
    ------
    ValidationError
        If the name has no characters usable in a slug.
    DuplicateEntryError
        If the name or slug is taken.
    """
    slug = slugify(body.name)
    if not slug:
        raise ValidationError(
            errors=[
                {
                    "field": "name",
                    "message": "Name must contain letters or digits",
                    "type": "value_error",
                },
            ],
        )
    if await repo.exists_by_name_or_slug(body.name, slug):
        raise DuplicateEntryError(detail=repo.duplicate_detail)

    category = await repo.add(CategoryDB(name=body.name, slug=slug))
    logger.info("Category created", category_id=str(category.id), slug=slug)
    return respond(
        CategoryEnvelope(category=CategoryResponse.model_validate(category)),
        HTTP_201_CREATED,
    )
