"""FastAPI dependencies for injection."""
from fastapi import Query

from core.auth import get_current_user, get_token_claims
from core.config import get_settings
from db.session import get_async_session
from services.storage import get_storage


class Pagination:
    """1-based page/limit query parameters shared by the list endpoints."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="1-based page number"),
        limit: int = Query(default=10, ge=1, description="Page size"),
    ) -> None:
        self.page = page
        self.limit = limit


__all__ = [
    "Pagination",
    "get_async_session",
    "get_current_user",
    "get_settings",
    "get_storage",
    "get_token_claims",
]
