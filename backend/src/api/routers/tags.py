"""Tag listing endpoint."""
from fastapi import APIRouter, Depends

from api.dependencies import get_storage
from services.storage import BlogStorage

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[str])
async def list_tags(
    storage: BlogStorage = Depends(get_storage),
) -> list[str]:
    """
    Get every distinct tag used by published blogs.

    Tags that only appear on drafts are not listed, so the tag filter on
    GET /blogs never leads to an empty page for visitors.
    """
    return await storage.get_all_tags()
