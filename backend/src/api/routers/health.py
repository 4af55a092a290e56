"""Liveness endpoint for load balancers and uptime checks."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from services.storage import BlogStorage, get_storage

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status plus database reachability."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check(storage: BlogStorage = Depends(get_storage)) -> HealthResponse:
    """
    Report whether the API and its database are up.

    Always 200: an unreachable database marks the service degraded rather than
    failing the probe.
    """
    database_up = await storage.ping()
    return HealthResponse(
        status="healthy" if database_up else "degraded",
        database="healthy" if database_up else "unhealthy",
    )
