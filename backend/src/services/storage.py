"""
Storage layer for users and blog posts.

Routers never touch the ORM directly; they receive a `BlogStorage` built per
request by the `get_storage` dependency. Each mutating operation is a single
statement committed on its own.
"""
import logging
from datetime import UTC, datetime
from typing import Protocol

from fastapi import Depends
from sqlalchemy import ColumnElement, Select, delete, exists, func, or_, select, text, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from db.session import get_async_session
from models.blog import Blog
from models.user import User
from schemas.blog import BlogCreate, BlogResponse, BlogUpdate, BlogWithAuthorResponse
from schemas.user import UserProfileUpdate, UserResponse, UserUpsert
from services.derivation import apply_derived_fields
from services.utils import escape_ilike


logger = logging.getLogger(__name__)

ANONYMOUS_AUTHOR_ID = ""


class BlogStorage(Protocol):
    """Operations the API layer needs from the backing store."""

    async def get_user(self, user_id: str) -> User | None: ...

    async def upsert_user(self, data: UserUpsert) -> User: ...

    async def update_user(self, user_id: str, data: UserProfileUpdate) -> User: ...

    async def get_blogs(
        self,
        page: int,
        limit: int,
        tag: str | None = None,
        search: str | None = None,
    ) -> list[BlogWithAuthorResponse]: ...

    async def get_blog(self, blog_id: int) -> BlogWithAuthorResponse | None: ...

    async def create_blog(self, author_id: str, data: BlogCreate) -> Blog: ...

    async def update_blog(self, blog_id: int, data: BlogUpdate) -> Blog: ...

    async def delete_blog(self, blog_id: int) -> None: ...

    async def like_blog(self, blog_id: int) -> Blog: ...

    async def get_user_blogs(
        self, user_id: str, page: int, limit: int,
    ) -> list[BlogWithAuthorResponse]: ...

    async def get_all_tags(self) -> list[str]: ...

    async def ping(self) -> bool: ...


def anonymous_author() -> UserResponse:
    """Placeholder author for posts whose user row is missing."""
    now = datetime.now(UTC)
    return UserResponse(
        id=ANONYMOUS_AUTHOR_ID,
        email=None,
        first_name="Anonymous",
        last_name=None,
        profile_image_url=None,
        bio=None,
        created_at=now,
        updated_at=now,
    )


def _with_author(blog: Blog, author: User | None) -> BlogWithAuthorResponse:
    """Combine a blog row with its outer-joined author, resolving a missing one."""
    return BlogWithAuthorResponse(
        **BlogResponse.model_validate(blog).model_dump(),
        author=UserResponse.model_validate(author) if author else anonymous_author(),
    )


def _blogs_with_authors() -> Select:
    return select(Blog, User).outerjoin(User, Blog.author_id == User.id)


def _newest_first_page(query: Select, page: int, limit: int) -> Select:
    """Order newest first (id breaks timestamp ties) and slice out a 1-based page."""
    return (
        query
        .order_by(Blog.created_at.desc(), Blog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )


class DatabaseStorage:
    """`BlogStorage` backed by a SQLAlchemy async session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    @property
    def _dialect_name(self) -> str:
        return self._db.get_bind().dialect.name

    def _tag_filter(self, tag: str) -> ColumnElement[bool]:
        """Set-membership test of tag against the blog's tag list."""
        if self._dialect_name == "postgresql":
            return Blog.tags.any(tag)
        # SQLite stores the list as JSON
        tag_values = func.json_each(Blog.tags).table_valued("value")
        return exists(select(tag_values.c.value).where(tag_values.c.value == tag))

    # Users

    async def get_user(self, user_id: str) -> User | None:
        """Get a user by id, or None."""
        return await self._db.get(User, user_id)

    async def upsert_user(self, data: UserUpsert) -> User:
        """
        Insert a user or overwrite the supplied fields of an existing one.

        Keyed on id, so repeated calls with the same payload are idempotent apart
        from updated_at.
        """
        values = data.model_dump(exclude_unset=True)
        insert = postgresql_insert if self._dialect_name == "postgresql" else sqlite_insert
        changes = {key: value for key, value in values.items() if key != "id"}
        stmt = (
            insert(User)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[User.id],
                set_={**changes, "updated_at": func.now()},
            )
            .returning(User)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        user = result.scalar_one()
        await self._db.commit()
        logger.debug("user_upserted", extra={"user_id": user.id})
        return user

    async def update_user(self, user_id: str, data: UserProfileUpdate) -> User:
        """
        Apply a partial profile patch.

        Raises:
            NotFoundError: If the user does not exist.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(**data.model_dump(exclude_unset=True), updated_at=func.now())
            .returning(User)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        await self._db.commit()
        return user

    # Blogs

    async def get_blogs(
        self,
        page: int,
        limit: int,
        tag: str | None = None,
        search: str | None = None,
    ) -> list[BlogWithAuthorResponse]:
        """
        List published posts with their authors, newest first.

        Args:
            page: 1-based page number.
            limit: Page size.
            tag: Only posts whose tag list contains this exact tag.
            search: Case-insensitive substring of title or content.

        Returns:
            One page of posts; empty when nothing matches.
        """
        query = _blogs_with_authors().where(Blog.published.is_(True))
        if tag:
            query = query.where(self._tag_filter(tag))
        if search:
            pattern = f"%{escape_ilike(search)}%"
            query = query.where(
                or_(
                    Blog.title.ilike(pattern, escape="\\"),
                    Blog.content.ilike(pattern, escape="\\"),
                ),
            )
        result = await self._db.execute(_newest_first_page(query, page, limit))
        return [_with_author(blog, author) for blog, author in result.all()]

    async def get_blog(self, blog_id: int) -> BlogWithAuthorResponse | None:
        """Get a post with its author regardless of published state, or None."""
        result = await self._db.execute(_blogs_with_authors().where(Blog.id == blog_id))
        row = result.first()
        if row is None:
            return None
        blog, author = row
        return _with_author(blog, author)

    async def create_blog(self, author_id: str, data: BlogCreate) -> Blog:
        """Store a new post owned by author_id, deriving excerpt and read_time."""
        values = apply_derived_fields(data.model_dump())
        blog = Blog(author_id=author_id, likes=0, **values)
        self._db.add(blog)
        await self._db.commit()
        await self._db.refresh(blog)
        logger.info("blog_created", extra={"blog_id": blog.id, "author_id": author_id})
        return blog

    async def update_blog(self, blog_id: int, data: BlogUpdate) -> Blog:
        """
        Apply the fields present in a sparse patch.

        When the patch carries content, excerpt (if not supplied) and read_time are
        recomputed from it.

        Raises:
            NotFoundError: If the post does not exist.
        """
        values = apply_derived_fields(data.model_dump(exclude_unset=True))
        stmt = (
            update(Blog)
            .where(Blog.id == blog_id)
            .values(**values, updated_at=func.now())
            .returning(Blog)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        blog = result.scalar_one_or_none()
        if blog is None:
            raise NotFoundError("Blog not found")
        await self._db.commit()
        return blog

    async def delete_blog(self, blog_id: int) -> None:
        """Delete a post. Deleting a missing id is a no-op."""
        await self._db.execute(delete(Blog).where(Blog.id == blog_id))
        await self._db.commit()
        logger.info("blog_deleted", extra={"blog_id": blog_id})

    async def like_blog(self, blog_id: int) -> Blog:
        """
        Increment likes by one inside the database.

        The increment is a single UPDATE so concurrent likes are never lost.

        Raises:
            NotFoundError: If the post does not exist.
        """
        stmt = (
            update(Blog)
            .where(Blog.id == blog_id)
            .values(likes=Blog.likes + 1, updated_at=func.now())
            .returning(Blog)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        blog = result.scalar_one_or_none()
        if blog is None:
            raise NotFoundError("Blog not found")
        await self._db.commit()
        return blog

    async def get_user_blogs(
        self, user_id: str, page: int, limit: int,
    ) -> list[BlogWithAuthorResponse]:
        """List every post by user_id, drafts included, newest first."""
        query = _blogs_with_authors().where(Blog.author_id == user_id)
        result = await self._db.execute(_newest_first_page(query, page, limit))
        return [_with_author(blog, author) for blog, author in result.all()]

    async def get_all_tags(self) -> list[str]:
        """Distinct tags across published posts, in first-seen order."""
        result = await self._db.execute(
            select(Blog.tags).where(Blog.published.is_(True)).order_by(Blog.id),
        )
        seen: dict[str, None] = {}
        for tags in result.scalars():
            for tag in tags or []:
                seen.setdefault(tag, None)
        return list(seen)

    async def ping(self) -> bool:
        """Round-trip a trivial query. False when the database cannot be reached."""
        try:
            await self._db.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.exception("database_ping_failed")
            return False
        return True


async def get_storage(db: AsyncSession = Depends(get_async_session)) -> BlogStorage:
    """Build the request's storage handle on top of its database session."""
    return DatabaseStorage(db)
