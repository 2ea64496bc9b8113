from app.routes.auth import router as auth_router
from app.routes.authors import router as authors_router
from app.routes.blog import router as blog_router
from app.routes.categories import router as categories_router
from app.routes.users import router as users_router

__all__ = [
    "auth_router",
    "authors_router",
    "blog_router",
    "categories_router",
    "users_router",
]
