"""
Blog schemas.

Request models validate and normalize blog fields eagerly so a blog is
fully constructed before anything is written. Response models render
references as populated ``{id, name}`` objects.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

from app.configs.settings import MAX_EXCERPT_LENGTH, MAX_TITLE_LENGTH
from app.schemas.common import NamedRef
from app.utils.helpers import parse_bool, split_list
from app.utils.slug import slugify

BlogStatus = Literal["draft", "published"]


def _required_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            mssg = "Field is required and cannot be empty"
            raise ValueError(mssg)
    return value


def _optional_text(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _tags(value: Any) -> list[str]:
    tags = split_list(value)
    if not tags:
        mssg = "At least one tag is required"
        raise ValueError(mssg)
    return tags


def _slug(value: Any) -> Any:
    slug = slugify(str(value))
    if not slug:
        mssg = "Slug must contain at least one letter or digit"
        raise ValueError(mssg)
    return slug


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


RequiredText = Annotated[str, BeforeValidator(_required_text)]
OptionalText = Annotated[str, BeforeValidator(_optional_text)]
Tags = Annotated[list[str], BeforeValidator(_tags)]
Keywords = Annotated[list[str], BeforeValidator(split_list)]
Slug = Annotated[str, BeforeValidator(_slug)]
FormBool = Annotated[bool, BeforeValidator(parse_bool)]
AwareDatetime = Annotated[datetime, AfterValidator(_aware)]


class ResponsiveUrls(BaseModel):
    """Delivery URLs of the cover image at fixed sizes."""

    original: str
    thumbnail: str
    medium: str
    large: str
    mobile: str


class ImageMetadata(BaseModel):
    """Metadata derived from one upload; replaced wholesale on re-upload."""

    model_config = ConfigDict(populate_by_name=True)

    format: str
    original_format: str = Field(alias="originalFormat")
    is_animated: bool = Field(default=False, alias="isAnimated")
    size: int | Literal["processing"] = Field(
        description="Stored size in bytes, or 'processing' when not yet known",
    )
    public_id: str = Field(alias="publicId")
    width: int | None = None
    height: int | None = None
    responsive_urls: ResponsiveUrls = Field(alias="responsiveUrls")


class UploadedImage(BaseModel):
    """Result of storing a cover image: its URL and derived metadata."""

    url: str
    metadata: ImageMetadata


class BlogCreate(BaseModel):
    """Blog creation payload (multipart form fields, image excluded)."""

    model_config = ConfigDict(populate_by_name=True)

    title: RequiredText = Field(..., max_length=MAX_TITLE_LENGTH, examples=["Hello, World!"])
    content: RequiredText = Field(..., examples=["First post body..."])
    excerpt: RequiredText = Field(..., max_length=MAX_EXCERPT_LENGTH, examples=["A first post"])
    image_alt: RequiredText = Field(..., alias="imageAlt", max_length=300)
    meta_description: OptionalText | None = Field(
        default=None,
        alias="metaDescription",
        max_length=500,
    )
    meta_keywords: Keywords = Field(default_factory=list, alias="metaKeywords")
    tags: Tags = Field(..., examples=[["python", "fastapi"]])
    status: BlogStatus = "published"
    author_id: UUID = Field(..., alias="authorId")
    category_id: UUID = Field(..., alias="categoryId")
    is_featured: FormBool = Field(default=False, alias="isFeatured")
    slug: Slug | None = Field(
        default=None,
        max_length=250,
        description="Explicit slug; derived from the title when omitted",
    )
    publish_date: AwareDatetime | None = Field(
        default=None,
        alias="publishDate",
        description="Defaults to the creation time",
    )


class BlogPatch(BaseModel):
    """
    Partial blog update.

    Every field is optional; only fields present in the request are
    applied. Required text fields sent as empty strings are rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: RequiredText | None = Field(default=None, max_length=MAX_TITLE_LENGTH)
    content: RequiredText | None = None
    excerpt: RequiredText | None = Field(default=None, max_length=MAX_EXCERPT_LENGTH)
    image_alt: RequiredText | None = Field(default=None, alias="imageAlt", max_length=300)
    meta_description: OptionalText | None = Field(
        default=None,
        alias="metaDescription",
        max_length=500,
    )
    meta_keywords: Keywords | None = Field(default=None, alias="metaKeywords")
    tags: Tags | None = None
    status: BlogStatus | None = None
    author_id: UUID | None = Field(default=None, alias="authorId")
    category_id: UUID | None = Field(default=None, alias="categoryId")
    is_featured: FormBool | None = Field(default=None, alias="isFeatured")
    slug: Slug | None = Field(default=None, max_length=250)
    publish_date: AwareDatetime | None = Field(default=None, alias="publishDate")


class BlogResponse(BaseModel):
    """Blog as returned by the API, with populated references."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str
    image_url: str = Field(alias="imageUrl")
    image_alt: str = Field(alias="imageAlt")
    image_metadata: ImageMetadata | None = Field(default=None, alias="imageMetadata")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    meta_keywords: list[str] = Field(default_factory=list, alias="metaKeywords")
    tags: list[str]
    status: BlogStatus
    is_featured: bool = Field(alias="isFeatured")
    publish_date: datetime | None = Field(default=None, alias="publishDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    author_ref: NamedRef | None = Field(default=None, alias="authorId")
    category_ref: NamedRef | None = Field(default=None, alias="categoryId")
    created_by_ref: NamedRef | None = Field(default=None, alias="author")


class BlogEnvelope(BaseModel):
    """Single-blog envelope."""

    success: bool = True
    blog: BlogResponse


class BlogListEnvelope(BaseModel):
    """
    Listing envelope.

    ``currentPage`` and ``totalPages`` are present only when the request
    supplied ``limit``; routes serialize with ``exclude_unset``.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    blogs: list[BlogResponse]
    total_count: int = Field(alias="totalCount")
    current_page: int | None = Field(default=None, alias="currentPage")
    total_pages: int | None = Field(default=None, alias="totalPages")
