"""Application dependencies: sessions, repositories, services and authentication."""

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from fastapi import Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from app.configs.settings import MAX_SEARCH_LENGTH
from app.db import get_session
from app.errors.auth import InvalidTokenError, NotAuthenticatedError
from app.managers.token_manager import decode_access_token
from app.models import UserDB
from app.queries import ListingParams
from app.repositories import AuthorRepository, BlogRepository, CategoryRepository, UserRepository
from app.schemas.blog import BlogCreate, BlogPatch
from app.services import AuthService, BlogImageService, BlogService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_repository(session: SessionDep) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


def get_blog_repository(session: SessionDep) -> BlogRepository:
    """
    Resolve the `BlogRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    BlogRepository
        Repository instance bound to the session.
    """
    return BlogRepository(session)


def get_category_repository(session: SessionDep) -> CategoryRepository:
    return CategoryRepository(session)


def get_author_repository(session: SessionDep) -> AuthorRepository:
    return AuthorRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
CategoryRepoDep = Annotated[CategoryRepository, Depends(get_category_repository)]
AuthorRepoDep = Annotated[AuthorRepository, Depends(get_author_repository)]


def get_media_service(request: Request) -> BlogImageService:
    """The image service created by the application lifespan."""
    return request.app.state.media_service


MediaDep = Annotated[BlogImageService, Depends(get_media_service)]


def get_blog_service(repo: BlogRepoDep, media: MediaDep) -> BlogService:
    return BlogService(repo, media)


def get_auth_service(repo: UserRepoDep) -> AuthService:
    return AuthService(repo)


BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    repo: UserRepoDep,
) -> UserDB:
    """
    Get current authenticated user using the user id from token claims.

    Parameters
    ----------
    token : str | None
        Bearer token, None when the header is missing.
    repo : UserRepository
        User repository.

    Returns
    -------
    UserDB
        Current authenticated user.

    Raises
    ------
    NotAuthenticatedError
        If no bearer token was sent.
    InvalidTokenError
        If the token fails verification or its user no longer exists.
    """
    if not token:
        raise NotAuthenticatedError

    token_data = decode_access_token(token)
    if not token_data:
        raise InvalidTokenError

    user = await repo.get_by_id(token_data.user_id)
    if not user:
        raise InvalidTokenError("User not found")

    return user


UserDBDep = Annotated[UserDB, Depends(get_current_user)]


def get_listing_params(
    status: Annotated[
        Literal["draft", "published"] | None,
        Query(description="Only blogs with this status"),
    ] = None,
    search: Annotated[
        str | None,
        Query(max_length=MAX_SEARCH_LENGTH, description="Free-text search"),
    ] = None,
    page: Annotated[
        int | None,
        Query(description="Page number; values below 1 mean the first page"),
    ] = None,
    limit: Annotated[
        int | None,
        Query(ge=1, description="Page size; omit for an unpaginated listing"),
    ] = None,
) -> ListingParams:
    """
    Dependency to construct `ListingParams` from query parameters.

    Returns
    -------
    ListingParams
        Aggregated query parameters object.
    """
    return ListingParams(status=status, search=search, page=page, limit=limit)


ListingParamsDep = Annotated[ListingParams, Depends(get_listing_params)]


# Form fields that may repeat to send a list
_LIST_FIELDS = frozenset({"tags", "metaKeywords"})
IMAGE_FIELD = "image"


@dataclass(frozen=True)
class BlogForm[SchemaT: BaseModel]:
    """
    Parsed multipart blog form.

    Parameters
    ----------
    data : SchemaT
        Validated fields.
    image : UploadFile | None
        Cover image, None when the form carried no file.
    """

    data: SchemaT
    image: UploadFile | None


async def _read_blog_form(request: Request) -> tuple[dict[str, Any], UploadFile | None]:
    """
    Collect the fields that were actually sent.

    The raw form is read directly because an empty string must stay an
    explicit (and invalid) value rather than collapse into "not sent".
    """
    form = await request.form()
    data: dict[str, Any] = {}
    for key in form:
        if key == IMAGE_FIELD:
            continue
        values = [value for value in form.getlist(key) if isinstance(value, str)]
        if not values:
            continue
        if key in _LIST_FIELDS and len(values) > 1:
            data[key] = values
        else:
            data[key] = values[-1]

    image = form.get(IMAGE_FIELD)
    if not isinstance(image, UploadFile) or not image.filename:
        image = None
    return data, image


def _validate_form[SchemaT: BaseModel](schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


async def get_blog_create_form(request: Request) -> BlogForm[BlogCreate]:
    data, image = await _read_blog_form(request)
    return BlogForm(data=_validate_form(BlogCreate, data), image=image)


async def get_blog_patch_form(request: Request) -> BlogForm[BlogPatch]:
    data, image = await _read_blog_form(request)
    return BlogForm(data=_validate_form(BlogPatch, data), image=image)


BlogCreateFormDep = Annotated[BlogForm[BlogCreate], Depends(get_blog_create_form)]
BlogPatchFormDep = Annotated[BlogForm[BlogPatch], Depends(get_blog_patch_form)]
