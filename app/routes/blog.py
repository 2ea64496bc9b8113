"""
Blog Routes.

Provides listing, lookup and admin CRUD endpoints for blog posts.

Summary
-------
Endpoints include:
  - List blogs (optional status filter and search)
  - List published blogs
  - List featured blogs
  - List scheduled blogs (admin)
  - Get blog by slug
  - Get blog by id
  - Create blog (admin, multipart with cover image)
  - Update blog (admin, multipart with optional cover image)
  - Delete blog (admin)

Dependencies
------------
  - `BlogServiceDep`: Blog use cases bound to the request session.
  - `ListingParamsDep`: `status`, `search`, `page` and `limit` query values.
  - `AdminDep`: Authenticated admin user.

Rate Limiting
-------------
Reads and writes use separate tiered limits. Clients sending `X-API-Key`
get higher throughput.

Listing envelopes carry `currentPage` and `totalPages` only when the
request supplied `limit`.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.auth.permissions import AdminDep
from app.configs import STORE_TIMEOUT_MESSAGE
from app.decorators import timed
from app.dependencies import (
    BlogCreateFormDep,
    BlogPatchFormDep,
    BlogServiceDep,
    ListingParamsDep,
)
from app.managers import limiter, read_limit, write_limit
from app.queries import ListingEndpoint
from app.schemas import (
    BlogCreate,
    BlogEnvelope,
    BlogListEnvelope,
    BlogPatch,
    MessageResponse,
    error_example,
)


router = APIRouter(prefix="/api/blogs", tags=["📝 Blogs"])

BLOG_EXAMPLE: dict[str, Any] = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "title": "Hello, World!",
    "slug": "hello-world",
    "content": "First post body...",
    "excerpt": "A first post",
    "imageUrl": "https://res.cloudinary.com/demo/image/upload/blog-images/abc.webp",
    "imageAlt": "Sunrise over the bay",
    "tags": ["intro", "news"],
    "status": "published",
    "isFeatured": False,
    "publishDate": "2025-01-01T00:00:00Z",
    "authorId": {"id": "123e4567-e89b-12d3-a456-426614174000", "name": "Jane Doe"},
    "categoryId": {"id": "123e4567-e89b-12d3-a456-426614174001", "name": "News"},
    "author": {"id": "123e4567-e89b-12d3-a456-426614174002", "name": "Admin"},
}

LIST_RESPONSES: dict[int | str, dict[str, Any]] = {
    200: {
        "content": {
            "application/json": {
                "example": {
                    "success": True,
                    "blogs": [BLOG_EXAMPLE],
                    "totalCount": 25,
                    "currentPage": 2,
                    "totalPages": 3,
                },
            },
        },
    },
    400: error_example("status: Input should be 'draft' or 'published'", "RequestValidationError"),
    429: error_example("Too many requests, please try again later", "RateLimitExceeded"),
    504: error_example(STORE_TIMEOUT_MESSAGE, "QueryTimeoutError"),
}

ADMIN_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: error_example("Not authorized, no token", "NotAuthenticatedError"),
    403: error_example("Not authorized as an admin", "ForbiddenError"),
}


def multipart_body(schema: type[BaseModel], *, image_required: bool) -> dict[str, Any]:
    """
    OpenAPI request body for a blog form.

    The form is parsed by hand, so its schema is attached explicitly.
    """
    json_schema = schema.model_json_schema(by_alias=True)
    properties = {
        **json_schema.get("properties", {}),
        "image": {"type": "string", "format": "binary", "description": "Cover image"},
    }
    required = list(json_schema.get("required", []))
    if image_required:
        required.append("image")
    return {
        "requestBody": {
            "required": True,
            "content": {
                "multipart/form-data": {
                    "schema": {"type": "object", "properties": properties, "required": required},
                },
            },
        },
    }


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    response_model_exclude_unset=True,
    summary="List blogs",
    description="List blogs of any status, newest first. Filter by `status` and `search`.",
    responses=LIST_RESPONSES,
    operation_id="blogs_list",
)
@timed("/api/blogs")
@limiter.limit(read_limit)
async def list_blogs(
    request: Request,
    response: Response,
    params: ListingParamsDep,
    service: BlogServiceDep,
) -> BlogListEnvelope:
    """
    List blogs.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    params : ListingParams
        Status, search and pagination values.
    service : BlogService
        Blog use cases.

    Returns
    -------
    BlogListEnvelope
        Page of blogs with `totalCount`, plus pagination keys when `limit` was given.
    """
    return await service.list_blogs(ListingEndpoint.ALL, params)


@router.get(
    "/published",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    response_model_exclude_unset=True,
    summary="List published blogs",
    description=(
        "Published blogs whose publish date has passed (or is absent), latest first."
    ),
    responses=LIST_RESPONSES,
    operation_id="blogs_list_published",
)
@timed("/api/blogs/published")
@limiter.limit(read_limit)
async def list_published_blogs(
    request: Request,
    response: Response,
    params: ListingParamsDep,
    service: BlogServiceDep,
) -> BlogListEnvelope:
    """
    List publicly visible blogs.

    Returns
    -------
    BlogListEnvelope
        Visible blogs sorted by publish date, latest first.
    """
    return await service.list_blogs(ListingEndpoint.PUBLISHED, params)


@router.get(
    "/featured",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    response_model_exclude_unset=True,
    summary="List featured blogs",
    description=(
        "Featured blogs. Defaults to visible published posts; an explicit `status` "
        "overrides the published default."
    ),
    responses=LIST_RESPONSES,
    operation_id="blogs_list_featured",
)
@timed("/api/blogs/featured")
@limiter.limit(read_limit)
async def list_featured_blogs(
    request: Request,
    response: Response,
    params: ListingParamsDep,
    service: BlogServiceDep,
) -> BlogListEnvelope:
    """
    List featured blogs.

    Returns
    -------
    BlogListEnvelope
        Featured blogs sorted by publish date, latest first.
    """
    return await service.list_blogs(ListingEndpoint.FEATURED, params)


@router.get(
    "/scheduled",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    response_model_exclude_unset=True,
    summary="List scheduled blogs",
    description="Published blogs with a future publish date, earliest due first. Admin only.",
    responses={**LIST_RESPONSES, **ADMIN_RESPONSES},
    operation_id="blogs_list_scheduled",
)
@timed("/api/blogs/scheduled")
@limiter.limit(read_limit)
async def list_scheduled_blogs(
    request: Request,
    response: Response,
    params: ListingParamsDep,
    service: BlogServiceDep,
    admin: AdminDep,
) -> BlogListEnvelope:
    """
    List blogs waiting for their publish date.

    Parameters
    ----------
    admin : UserDB
        Authenticated admin.

    Returns
    -------
    BlogListEnvelope
        Scheduled blogs sorted by publish date, earliest first.
    """
    return await service.list_blogs(ListingEndpoint.SCHEDULED, params)


@router.get(
    "/slug/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Get blog by slug",
    description="Scheduled posts are reported as not found until their publish date.",
    responses={
        200: {"content": {"application/json": {"example": {"success": True, "blog": BLOG_EXAMPLE}}}},
        404: error_example("Blog not found", "RecordNotFoundError"),
    },
    operation_id="blogs_get_by_slug",
)
@timed("/api/blogs/slug")
@limiter.limit(read_limit)
async def get_blog_by_slug(
    request: Request,
    response: Response,
    slug: str,
    service: BlogServiceDep,
) -> BlogEnvelope:
    """
    Get blog by slug.

    Parameters
    ----------
    slug : str
        Blog slug.

    Returns
    -------
    BlogEnvelope
        The blog with populated references.
    """
    return BlogEnvelope(success=True, blog=await service.get_by_slug(slug))


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Get blog by ID",
    responses={
        200: {"content": {"application/json": {"example": {"success": True, "blog": BLOG_EXAMPLE}}}},
        404: error_example("Blog not found", "RecordNotFoundError"),
    },
    operation_id="blogs_get_by_id",
)
@timed("/api/blogs/{blog_id}")
@limiter.limit(read_limit)
async def get_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    service: BlogServiceDep,
) -> BlogEnvelope:
    """
    Get blog by ID.

    Parameters
    ----------
    blog_id : UUID
        Blog identifier.

    Returns
    -------
    BlogEnvelope
        The blog with populated references.
    """
    return BlogEnvelope(success=True, blog=await service.get_by_id(blog_id))


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create a blog",
    description=(
        "Multipart form with the blog fields and a required `image`. Without `slug` "
        "the slug is derived from the title, with a numeric suffix on collision."
    ),
    responses={
        201: {"content": {"application/json": {"example": {"success": True, "blog": BLOG_EXAMPLE}}}},
        400: error_example("tags: At least one tag is required", "RequestValidationError"),
        **ADMIN_RESPONSES,
        502: error_example("We couldn't save your file. Please try again later.", "StorageError"),
    },
    openapi_extra=multipart_body(BlogCreate, image_required=True),
    operation_id="blogs_create",
)
@timed("/api/blogs/create")
@limiter.limit(write_limit)
async def create_blog(
    request: Request,
    response: Response,
    form: BlogCreateFormDep,
    service: BlogServiceDep,
    admin: AdminDep,
) -> BlogEnvelope:
    """
    Create a blog post.

    Parameters
    ----------
    form : BlogForm[BlogCreate]
        Validated fields and the cover image.
    service : BlogService
        Blog use cases.
    admin : UserDB
        Authenticated admin, recorded as the creator.

    Returns
    -------
    BlogEnvelope
        The created blog.

    Raises
    ------
    MissingImageError
        If no image was sent.
    DuplicateEntryError
        If an explicit slug is taken.
    """
    blog = await service.create(form.data, form.image, admin)
    return BlogEnvelope(success=True, blog=blog)


@router.put(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Update a blog",
    description=(
        "Multipart partial update; only sent fields change. A new `image` replaces the "
        "cover image and its metadata."
    ),
    responses={
        400: error_example("Blog with slug 'hello-world' already exists", "DuplicateEntryError"),
        404: error_example("Blog not found", "RecordNotFoundError"),
        **ADMIN_RESPONSES,
    },
    openapi_extra=multipart_body(BlogPatch, image_required=False),
    operation_id="blogs_update",
)
@timed("/api/blogs/update")
@limiter.limit(write_limit)
async def update_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    form: BlogPatchFormDep,
    service: BlogServiceDep,
    admin: AdminDep,
) -> BlogEnvelope:
    """
    Update a blog post.

    Parameters
    ----------
    blog_id : UUID
        Blog identifier.
    form : BlogForm[BlogPatch]
        Fields to change and an optional new image.

    Returns
    -------
    BlogEnvelope
        The updated blog.
    """
    blog = await service.update(blog_id, form.data, form.image)
    return BlogEnvelope(success=True, blog=blog)


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a blog",
    description="Deletes the blog, then its cover image. Image cleanup failures are only logged.",
    responses={
        200: {"content": {"application/json": {"example": {"success": True, "message": "Blog removed"}}}},
        404: error_example("Blog not found", "RecordNotFoundError"),
        **ADMIN_RESPONSES,
    },
    operation_id="blogs_delete",
)
@timed("/api/blogs/delete")
@limiter.limit(write_limit)
async def delete_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    service: BlogServiceDep,
    admin: AdminDep,
) -> MessageResponse:
    """
    Delete a blog post.

    Parameters
    ----------
    blog_id : UUID
        Blog identifier.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await service.delete(blog_id)
    return MessageResponse(success=True, message="Blog removed")
