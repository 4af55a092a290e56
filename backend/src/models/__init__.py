"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.blog import Blog
from models.user import User

__all__ = ["Base", "Blog", "TimestampMixin", "User"]
