import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import get_settings
from dependencies import get_context, limiter
from schemas.advisory import Failure, SpendingTrend, SpendingTrendResult
from schemas.finance import (
    CategoryUpdate,
    SuggestionInput,
    SuggestionState,
    Transaction,
    TransactionCreate,
)
from services.context import AppContext
from services.errors import UserInputError

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _suggestion_state(ctx: AppContext) -> SuggestionState:
    s = ctx.suggestions
    return SuggestionState(text=s.text, suggestion=s.suggestion, is_suggesting=s.is_suggesting)


@router.get("", response_model=list[Transaction])
async def list_transactions(ctx: AppContext = Depends(get_context)):
    return ctx.transactions.all()


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def add_transaction(data: TransactionCreate, ctx: AppContext = Depends(get_context)):
    """Add an expense under the current suggestion, or "Other" when there is none."""
    txn = ctx.transactions.add(
        data.description, data.amount, category=ctx.suggestions.commit_category()
    )
    ctx.suggestions.reset()
    return txn


@router.post("/suggest", response_model=SuggestionState)
async def update_description(data: SuggestionInput, ctx: AppContext = Depends(get_context)):
    """Report a change to the description field. The category request is
    debounced; poll ``/suggestion`` for the settled result."""
    ctx.suggestions.on_input_change(data.text)
    return _suggestion_state(ctx)


@router.get("/suggestion", response_model=SuggestionState)
async def get_suggestion(ctx: AppContext = Depends(get_context)):
    return _suggestion_state(ctx)


@router.post("/trend", response_model=SpendingTrendResult)
@limiter.limit(settings.trend_rate_limit)
async def spending_trend(request: Request, ctx: AppContext = Depends(get_context)):
    items = ctx.transactions.spend_items()
    if not items:
        raise UserInputError("Add some transactions first")
    result = await ctx.advise(SpendingTrend(transactions=items))
    if isinstance(result, Failure):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)
    return result.payload


@router.post("/{txn_id}/confirm", response_model=Transaction)
async def confirm_transaction(txn_id: str, ctx: AppContext = Depends(get_context)):
    try:
        return ctx.transactions.confirm(txn_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")


@router.post("/{txn_id}/category", response_model=Transaction)
async def change_category(
    txn_id: str,
    data: CategoryUpdate,
    ctx: AppContext = Depends(get_context),
):
    try:
        return ctx.transactions.recategorize(txn_id, data.category)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
