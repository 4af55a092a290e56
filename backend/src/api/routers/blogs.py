"""Blog CRUD endpoints."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import Pagination, get_current_user, get_storage
from core.errors import ForbiddenError, NotFoundError
from models.user import User
from schemas.blog import BlogCreate, BlogResponse, BlogUpdate, BlogWithAuthorResponse
from services.storage import BlogStorage

router = APIRouter(prefix="/blogs", tags=["blogs"])


async def get_owned_blog(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    storage: BlogStorage = Depends(get_storage),
) -> BlogWithAuthorResponse:
    """Load a blog the caller is allowed to modify (404 if missing, 403 if not theirs)."""
    blog = await storage.get_blog(blog_id)
    if blog is None:
        raise NotFoundError("Blog not found")
    if blog.author_id != current_user.id:
        raise ForbiddenError("Not authorized to modify this blog")
    return blog


@router.get("", response_model=list[BlogWithAuthorResponse])
async def list_blogs(
    pagination: Pagination = Depends(),
    tag: str | None = Query(default=None, description="Only posts carrying this tag"),
    search: str | None = Query(default=None, description="Search title and content"),
    storage: BlogStorage = Depends(get_storage),
) -> list[BlogWithAuthorResponse]:
    """List published blogs, newest first."""
    return await storage.get_blogs(
        page=pagination.page,
        limit=pagination.limit,
        tag=tag,
        search=search,
    )


@router.get("/{blog_id}", response_model=BlogWithAuthorResponse)
async def get_blog(
    blog_id: int,
    storage: BlogStorage = Depends(get_storage),
) -> BlogWithAuthorResponse:
    """Get a single blog by ID, published or not."""
    blog = await storage.get_blog(blog_id)
    if blog is None:
        raise NotFoundError("Blog not found")
    return blog


@router.post("", response_model=BlogResponse, status_code=201)
async def create_blog(
    data: BlogCreate,
    current_user: User = Depends(get_current_user),
    storage: BlogStorage = Depends(get_storage),
) -> BlogResponse:
    """Create a new blog authored by the caller."""
    blog = await storage.create_blog(current_user.id, data)
    return BlogResponse.model_validate(blog)


@router.put("/{blog_id}", response_model=BlogResponse)
async def update_blog(
    data: BlogUpdate,
    blog: BlogWithAuthorResponse = Depends(get_owned_blog),
    storage: BlogStorage = Depends(get_storage),
) -> BlogResponse:
    """Update the fields present in the body of one of the caller's blogs."""
    updated = await storage.update_blog(blog.id, data)
    return BlogResponse.model_validate(updated)


@router.delete("/{blog_id}", status_code=204)
async def delete_blog(
    blog: BlogWithAuthorResponse = Depends(get_owned_blog),
    storage: BlogStorage = Depends(get_storage),
) -> None:
    """Delete one of the caller's blogs."""
    await storage.delete_blog(blog.id)


@router.post(
    "/{blog_id}/like",
    response_model=BlogResponse,
    dependencies=[Depends(get_current_user)],
)
async def like_blog(
    blog_id: int,
    storage: BlogStorage = Depends(get_storage),
) -> BlogResponse:
    """Add one like to a blog."""
    blog = await storage.like_blog(blog_id)
    return BlogResponse.model_validate(blog)
