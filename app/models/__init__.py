"""Database models for the application."""

from app.models.blog import BlogDB
from app.models.taxonomy import AuthorDB, CategoryDB
from app.models.user import UserDB

__all__ = ["AuthorDB", "BlogDB", "CategoryDB", "UserDB"]
