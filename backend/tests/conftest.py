"""
Shared fixtures.

Each test gets its own on-disk SQLite database. Authentication is replaced by a
header-driven identity: requests carrying `X-Test-User: <id>` are authenticated
as that user, requests without it get a 401.
"""
import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from fastapi import FastAPI, HTTPException, Request  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from api.main import app  # noqa: E402
from core.auth import get_token_claims  # noqa: E402
from db.session import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_tables,
    get_async_session,
)
from models.user import User  # noqa: E402
from schemas.user import UserUpsert  # noqa: E402
from services.storage import DatabaseStorage  # noqa: E402

TEST_USER_HEADER = "X-Test-User"
DEFAULT_USER_ID = "user-1"


async def claims_from_test_header(request: Request) -> dict[str, Any]:
    """Stand-in for token verification keyed on the X-Test-User header."""
    user_id = request.headers.get(TEST_USER_HEADER)
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return {
        "sub": user_id,
        "email": f"{user_id}@example.com",
        "given_name": user_id.title(),
    }


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Engine on a fresh SQLite file with all tables created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return build_session_factory(db_engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A session for tests that exercise the storage layer directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(db_session: AsyncSession) -> DatabaseStorage:
    """Storage handle on the test session."""
    return DatabaseStorage(db_session)


@pytest.fixture
async def author(storage: DatabaseStorage) -> User:
    """A persisted user to own blogs in storage tests."""
    return await storage.upsert_user(
        UserUpsert(id=DEFAULT_USER_ID, email="author@example.com", first_name="Ada"),
    )


@pytest.fixture
def test_app(
    session_factory: async_sessionmaker[AsyncSession],
) -> Generator[FastAPI]:
    """The application wired to the test database and header-based auth."""

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_token_claims] = claims_from_test_header
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client authenticated as DEFAULT_USER_ID."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        headers={TEST_USER_HEADER: DEFAULT_USER_ID},
    ) as client:
        yield client


@pytest.fixture
async def anonymous_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client without credentials."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client
