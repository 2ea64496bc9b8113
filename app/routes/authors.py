"""
Author Routes.

Authors are the bylines blogs point at; they are not user accounts.
Listing and lookup are public, mutations require an admin. An author
still credited on blogs cannot be deleted.
"""

from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.auth.permissions import AdminDep
from app.decorators import timed
from app.dependencies import AuthorRepoDep
from app.managers import limiter, read_limit, write_limit
from app.schemas import (
    AuthorCreate,
    AuthorEnvelope,
    AuthorListEnvelope,
    AuthorResponse,
    AuthorUpdate,
    MessageResponse,
    error_example,
)

router = APIRouter(prefix="/api/authors", tags=["✍️ Authors"])

NOT_FOUND = {404: error_example("Author not found", "RecordNotFoundError")}
ADMIN_ONLY = {
    401: error_example("Not authorized, no token", "NotAuthenticatedError"),
    403: error_example("Not authorized as an admin", "ForbiddenError"),
}


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=AuthorListEnvelope,
    summary="List authors",
    operation_id="authors_list",
)
@timed("/api/authors")
@limiter.limit(read_limit)
async def list_authors(
    request: Request,
    response: Response,
    repo: AuthorRepoDep,
) -> AuthorListEnvelope:
    authors = await repo.list_all()
    return AuthorListEnvelope(
        success=True,
        authors=[AuthorResponse.model_validate(a) for a in authors],
    )


@router.get(
    "/{author_id}",
    response_class=ORJSONResponse,
    response_model=AuthorEnvelope,
    summary="Get author by ID",
    responses=NOT_FOUND,
    operation_id="authors_get",
)
@timed("/api/authors/{author_id}")
@limiter.limit(read_limit)
async def get_author(
    request: Request,
    response: Response,
    author_id: UUID,
    repo: AuthorRepoDep,
) -> AuthorEnvelope:
    author = await repo.get_or_raise(author_id)
    return AuthorEnvelope(success=True, author=AuthorResponse.model_validate(author))


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=AuthorEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create an author",
    responses={
        400: error_example("Author with this name already exists", "DuplicateEntryError"),
        **ADMIN_ONLY,
    },
    operation_id="authors_create",
)
@timed("/api/authors/create")
@limiter.limit(write_limit)
async def create_author(
    request: Request,
    response: Response,
    data: AuthorCreate,
    repo: AuthorRepoDep,
    admin: AdminDep,
) -> AuthorEnvelope:
    """
    Create an author.

    Parameters
    ----------
    data : AuthorCreate
        Author name.
    repo : AuthorRepository
        Author repository.
    admin : UserDB
        Authenticated admin.

    Returns
    -------
    AuthorEnvelope
        The created author.
    """
    author = await repo.create(data)
    return AuthorEnvelope(success=True, author=AuthorResponse.model_validate(author))


@router.put(
    "/{author_id}",
    response_class=ORJSONResponse,
    response_model=AuthorEnvelope,
    summary="Update an author",
    responses={
        400: error_example("Author with this name already exists", "DuplicateEntryError"),
        **NOT_FOUND,
        **ADMIN_ONLY,
    },
    operation_id="authors_update",
)
@timed("/api/authors/update")
@limiter.limit(write_limit)
async def update_author(
    request: Request,
    response: Response,
    author_id: UUID,
    data: AuthorUpdate,
    repo: AuthorRepoDep,
    admin: AdminDep,
) -> AuthorEnvelope:
    author = await repo.get_or_raise(author_id)
    author = await repo.update(author, data)
    return AuthorEnvelope(success=True, author=AuthorResponse.model_validate(author))


@router.delete(
    "/{author_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete an author",
    description="Refused with 400 and `blogsCount` while any blog credits the author.",
    responses={
        400: error_example(
            "Cannot delete this author. 1 blog is using it.",
            "ReferenceInUseError",
        ),
        **NOT_FOUND,
        **ADMIN_ONLY,
    },
    operation_id="authors_delete",
)
@timed("/api/authors/delete")
@limiter.limit(write_limit)
async def delete_author(
    request: Request,
    response: Response,
    author_id: UUID,
    repo: AuthorRepoDep,
    admin: AdminDep,
) -> MessageResponse:
    """
    Delete an uncredited author.

    Raises
    ------
    ReferenceInUseError
        If blogs still reference the author.
    """
    author = await repo.get_or_raise(author_id)
    await repo.delete_guarded(author)
    return MessageResponse(success=True, message="Author removed")
