"""Category and Author schemas."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from app.configs.settings import MAX_NAME_LENGTH


def _name(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            mssg = "Name is required"
            raise ValueError(mssg)
    return value


Name = Annotated[str, BeforeValidator(_name)]


class CategoryCreate(BaseModel):
    """Category creation payload."""

    name: Name = Field(..., max_length=MAX_NAME_LENGTH, examples=["Engineering"])
    description: str | None = Field(default=None, max_length=500)


class CategoryUpdate(BaseModel):
    """Category partial update payload."""

    name: Name | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=500)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class CategoryEnvelope(BaseModel):
    success: bool = True
    category: CategoryResponse


class CategoryListEnvelope(BaseModel):
    success: bool = True
    categories: list[CategoryResponse]


class AuthorCreate(BaseModel):
    """Author creation payload."""

    name: Name = Field(..., max_length=MAX_NAME_LENGTH, examples=["Jane Doe"])


class AuthorUpdate(BaseModel):
    """Author partial update payload."""

    name: Name | None = Field(default=None, max_length=MAX_NAME_LENGTH)


class AuthorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class AuthorEnvelope(BaseModel):
    success: bool = True
    author: AuthorResponse


class AuthorListEnvelope(BaseModel):
    success: bool = True
    authors: list[AuthorResponse]
