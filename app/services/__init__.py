from app.services.auth import AuthService
from app.services.blog import BlogService
from app.services.media import BlogImageService

__all__ = ["AuthService", "BlogImageService", "BlogService"]
