from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import get_settings
from dependencies import get_context, limiter
from schemas.advisory import AdvisoryBody, Failure
from services.context import AppContext


settings = get_settings()

router = APIRouter(prefix="/api/advisory", tags=["advisory"])


@router.post("")
@limiter.limit(settings.advisory_rate_limit)
async def advise(
    request: Request,
    body: AdvisoryBody,
    ctx: AppContext = Depends(get_context),
) -> dict[str, Any]:
    """Run one advisory call. The ``kind`` field selects the tool.

    Returns the validated payload unmodified. A failed call surfaces as 502
    with the tool's user-facing reason; the request can simply be retried.
    """
    result = await ctx.advise(body.root)
    if isinstance(result, Failure):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)
    return result.payload.model_dump(mode="json")
