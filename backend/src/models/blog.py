"""Blog post model."""
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, false
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.user import User


# text[] on PostgreSQL; SQLite has no array type so the list is stored as JSON
TagList = ARRAY(String).with_variant(JSON(), "sqlite")


class Blog(Base, TimestampMixin):
    """A blog post owned by the user referenced in author_id."""

    __tablename__ = "blogs"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text, comment="HTML produced by the rich text editor")
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(TagList, nullable=True, default=list)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        index=True,
    )
    published: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    featured_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    read_time: Mapped[int] = mapped_column(
        Integer,
        default=5,
        server_default="5",
        comment="Estimated minutes to read, at least 1",
    )
    likes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    author: Mapped["User"] = relationship(back_populates="blogs")
