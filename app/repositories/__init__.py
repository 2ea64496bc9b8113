"""Repository layer for database operations."""

from app.repositories.base import BaseRepository
from app.repositories.blog import BlogRepository, apply_patch, slug_suffix
from app.repositories.taxonomy import AuthorRepository, CategoryRepository
from app.repositories.user import UserRepository

__all__ = [
    "AuthorRepository",
    "BaseRepository",
    "BlogRepository",
    "CategoryRepository",
    "UserRepository",
    "apply_patch",
    "slug_suffix",
]
