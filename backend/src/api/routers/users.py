"""User profile endpoints."""
from fastapi import APIRouter, Depends

from api.dependencies import Pagination, get_current_user, get_storage
from core.errors import ForbiddenError, NotFoundError
from models.user import User
from schemas.blog import BlogWithAuthorResponse
from schemas.user import UserProfileUpdate, UserResponse
from services.storage import BlogStorage

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    storage: BlogStorage = Depends(get_storage),
) -> UserResponse:
    """Get a user's public profile."""
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserResponse.model_validate(user)


@router.get("/{user_id}/blogs", response_model=list[BlogWithAuthorResponse])
async def list_user_blogs(
    user_id: str,
    pagination: Pagination = Depends(),
    storage: BlogStorage = Depends(get_storage),
) -> list[BlogWithAuthorResponse]:
    """
    List a user's blogs, newest first.

    Drafts are included; profile pages show everything the author has written.
    """
    return await storage.get_user_blogs(user_id, page=pagination.page, limit=pagination.limit)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    storage: BlogStorage = Depends(get_storage),
) -> UserResponse:
    """Update the caller's own profile."""
    if user_id != current_user.id:
        raise ForbiddenError("Not authorized to update this profile")
    user = await storage.update_user(user_id, data)
    return UserResponse.model_validate(user)
