from fastapi import APIRouter, Depends

from dependencies import get_context
from schemas.catalog import Badge, ProgressResponse
from services.catalog import get_badges
from services.context import AppContext

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("", response_model=ProgressResponse)
async def get_progress(ctx: AppContext = Depends(get_context)):
    """Earned badges in award order."""
    return ProgressResponse(earned=ctx.ledger.badges(), total_available=len(get_badges()))


@router.get("/badges", response_model=list[Badge])
async def list_badges():
    return list(get_badges().values())
