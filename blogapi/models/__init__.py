"""Database models."""
from blogapi.models.base import Base
from blogapi.models.user import User, SessionToken, ROLE_ADMIN, ROLE_USER
from blogapi.models.post import Post, Comment
from blogapi.models.event import Event
from blogapi.models.book import Book

__all__ = [
    "Base",
    "User",
    "SessionToken",
    "ROLE_ADMIN",
    "ROLE_USER",
    "Post",
    "Comment",
    "Event",
    "Book",
]
