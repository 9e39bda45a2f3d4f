from fastapi import APIRouter, Depends

from dependencies import get_context
from schemas.catalog import Cohort, CohortProfile, ProfileSelect
from schemas.chat import Transcript
from services.catalog import get_cohort
from services.context import AppContext

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
async def get_profile(ctx: AppContext = Depends(get_context)):
    if ctx.cohort is None:
        return {"cohort": None}
    profile = get_cohort(ctx.cohort)
    return {"cohort": profile.id, "title": profile.title, "age_range": profile.age_range}


@router.post("", response_model=Transcript)
async def select_profile(data: ProfileSelect, ctx: AppContext = Depends(get_context)):
    """Select a cohort and open a fresh chat session seeded with its welcome message."""
    session = ctx.init_profile(data.cohort)
    return Transcript(cohort=session.cohort.value, messages=session.messages, in_flight=False)


@router.delete("")
async def reset_profile(ctx: AppContext = Depends(get_context)):
    ctx.reset_profile()
    return {"status": "reset"}


@router.get("/cohorts", response_model=list[CohortProfile])
async def list_cohorts():
    return [get_cohort(c) for c in Cohort]
