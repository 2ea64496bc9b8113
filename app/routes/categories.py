"""
Category Routes.

Summary
-------
Public listing and lookup of categories, plus admin create, update and
delete. A category still used by blogs cannot be deleted.

Rate Limiting
-------------
Reads use `read_limit`, mutations use `write_limit`.
"""

from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.auth.permissions import AdminDep
from app.decorators import timed
from app.dependencies import CategoryRepoDep
from app.managers import limiter, read_limit, write_limit
from app.schemas import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryResponse,
    CategoryUpdate,
    MessageResponse,
    error_example,
)

router = APIRouter(prefix="/api/categories", tags=["🗂️ Categories"])

NOT_FOUND = {404: error_example("Category not found", "RecordNotFoundError")}
ADMIN_ONLY = {
    401: error_example("Not authorized, no token", "NotAuthenticatedError"),
    403: error_example("Not authorized as an admin", "ForbiddenError"),
}


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryListEnvelope,
    summary="List categories",
    operation_id="categories_list",
)
@timed("/api/categories")
@limiter.limit(read_limit)
async def list_categories(
    request: Request,
    response: Response,
    repo: CategoryRepoDep,
) -> CategoryListEnvelope:
    """
    List all categories sorted by name.

    Returns
    -------
    CategoryListEnvelope
        Every category.
    """
    categories = await repo.list_all()
    return CategoryListEnvelope(
        success=True,
        categories=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.get(
    "/{category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryEnvelope,
    summary="Get category by ID",
    responses=NOT_FOUND,
    operation_id="categories_get",
)
@timed("/api/categories/{category_id}")
@limiter.limit(read_limit)
async def get_category(
    request: Request,
    response: Response,
    category_id: UUID,
    repo: CategoryRepoDep,
) -> CategoryEnvelope:
    category = await repo.get_or_raise(category_id)
    return CategoryEnvelope(success=True, category=CategoryResponse.model_validate(category))


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    description="The slug is derived from the name. Names are unique, ignoring case.",
    responses={
        400: error_example("Category with this name already exists", "DuplicateEntryError"),
        **ADMIN_ONLY,
    },
    operation_id="categories_create",
)
@timed("/api/categories/create")
@limiter.limit(write_limit)
async def create_category(
    request: Request,
    response: Response,
    data: CategoryCreate,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> CategoryEnvelope:
    """
    Create a category.

    Parameters
    ----------
    data : CategoryCreate
        Name and optional description.
    repo : CategoryRepository
        Category repository.
    admin : UserDB
        Authenticated admin.

    Returns
    -------
    CategoryEnvelope
        The created category.
    """
    category = await repo.create(data)
    return CategoryEnvelope(success=True, category=CategoryResponse.model_validate(category))


@router.put(
    "/{category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryEnvelope,
    summary="Update a category",
    description="Renaming a category re-derives its slug.",
    responses={
        400: error_example("Category with this name already exists", "DuplicateEntryError"),
        **NOT_FOUND,
        **ADMIN_ONLY,
    },
    operation_id="categories_update",
)
@timed("/api/categories/update")
@limiter.limit(write_limit)
async def update_category(
    request: Request,
    response: Response,
    category_id: UUID,
    data: CategoryUpdate,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> CategoryEnvelope:
    """
    Update a category.

    Parameters
    ----------
    category_id : UUID
        Category identifier.
    data : CategoryUpdate
        Fields to change.

    Returns
    -------
    CategoryEnvelope
        The updated category.
    """
    category = await repo.get_or_raise(category_id)
    category = await repo.update(category, data)
    return CategoryEnvelope(success=True, category=CategoryResponse.model_validate(category))


@router.delete(
    "/{category_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a category",
    description="Refused with 400 and `blogsCount` while any blog uses the category.",
    responses={
        400: error_example(
            "Cannot delete this category. 3 blogs are using it.",
            "ReferenceInUseError",
        ),
        **NOT_FOUND,
        **ADMIN_ONLY,
    },
    operation_id="categories_delete",
)
@timed("/api/categories/delete")
@limiter.limit(write_limit)
async def delete_category(
    request: Request,
    response: Response,
    category_id: UUID,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> MessageResponse:
    """
    Delete an unused category.

    Raises
    ------
    ReferenceInUseError
        If blogs still reference the category.
    """
    category = await repo.get_or_raise(category_id)
    await repo.delete_guarded(category)
    return MessageResponse(success=True, message="Category removed")
