"""Async SQLAlchemy engine and session factory."""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import get_settings
from models.base import Base


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine backing the connection pool.

    SQLite (used by the test suite) gets a generous busy timeout so concurrent
    writers queue on the database lock instead of failing.
    """
    connect_args = {"timeout": 30} if database_url.startswith("sqlite") else {}
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory that keeps loaded attributes after commit."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(bind: AsyncEngine) -> None:
    """Create any missing tables from the ORM metadata."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


settings = get_settings()

engine = build_engine(settings.database_url)

async_session_factory = build_session_factory(engine)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session.

    Storage operations commit their own writes; the final commit here only
    flushes anything a caller left pending.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
