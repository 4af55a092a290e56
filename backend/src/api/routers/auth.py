"""Endpoints about the authenticated caller."""
from fastapi import APIRouter, Depends

from api.dependencies import get_current_user
from models.user import User
from schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserResponse)
async def get_authenticated_user(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Return the caller's user record, synced from the identity provider."""
    return UserResponse.model_validate(current_user)
