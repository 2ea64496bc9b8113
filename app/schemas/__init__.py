from app.schemas.auth import TokenData
from app.schemas.blog import (
    BlogCreate,
    BlogEnvelope,
    BlogListEnvelope,
    BlogPatch,
    BlogResponse,
    ImageMetadata,
    ResponsiveUrls,
    UploadedImage,
)
from app.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    NamedRef,
    error_example,
)
from app.schemas.taxonomy import (
    AuthorCreate,
    AuthorEnvelope,
    AuthorListEnvelope,
    AuthorResponse,
    AuthorUpdate,
    CategoryCreate,
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryResponse,
    CategoryUpdate,
)
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    SignupRequest,
    UserEnvelope,
    UserListEnvelope,
    UserPublic,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "AuthorCreate",
    "AuthorEnvelope",
    "AuthorListEnvelope",
    "AuthorResponse",
    "AuthorUpdate",
    "BlogCreate",
    "BlogEnvelope",
    "BlogListEnvelope",
    "BlogPatch",
    "BlogResponse",
    "CategoryCreate",
    "CategoryEnvelope",
    "CategoryListEnvelope",
    "CategoryResponse",
    "CategoryUpdate",
    "ErrorResponse",
    "HealthResponse",
    "ImageMetadata",
    "LoginRequest",
    "MessageResponse",
    "NamedRef",
    "ProfileUpdate",
    "ResponsiveUrls",
    "SignupRequest",
    "TokenData",
    "UploadedImage",
    "UserEnvelope",
    "UserListEnvelope",
    "UserPublic",
    "UserResponse",
    "error_example",
]
