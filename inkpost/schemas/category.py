from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from inkpost.configs.settings import MAX_CATEGORY_NAME_LENGTH


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CATEGORY_NAME_LENGTH,
        description="Category name",
        examples=["Travel"],
    )


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str


class CategoryEnvelope(BaseModel):
    success: bool = True
    category: CategoryResponse


class CategoryListEnvelope(BaseModel):
    success: bool = True
    categories: list[CategoryResponse]
