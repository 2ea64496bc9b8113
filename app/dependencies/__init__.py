from app.dependencies.dependencies import (
    AuthorRepoDep,
    AuthServiceDep,
    BlogCreateFormDep,
    BlogForm,
    BlogPatchFormDep,
    BlogRepoDep,
    BlogServiceDep,
    CategoryRepoDep,
    ListingParamsDep,
    MediaDep,
    SessionDep,
    UserDBDep,
    UserRepoDep,
    get_auth_service,
    get_author_repository,
    get_blog_repository,
    get_blog_service,
    get_category_repository,
    get_current_user,
    get_listing_params,
    get_media_service,
    get_user_repository,
    oauth2_scheme,
)

__all__ = [
    "AuthServiceDep",
    "AuthorRepoDep",
    "BlogCreateFormDep",
    "BlogForm",
    "BlogPatchFormDep",
    "BlogRepoDep",
    "BlogServiceDep",
    "CategoryRepoDep",
    "ListingParamsDep",
    "MediaDep",
    "SessionDep",
    "UserDBDep",
    "UserRepoDep",
    "get_auth_service",
    "get_author_repository",
    "get_blog_repository",
    "get_blog_service",
    "get_category_repository",
    "get_current_user",
    "get_listing_params",
    "get_media_service",
    "get_user_repository",
    "oauth2_scheme",
]
