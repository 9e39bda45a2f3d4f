from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import get_settings
from dependencies import get_context, limiter
from schemas.advisory import BudgetOptimizationResult, Failure
from schemas.finance import FamilyExpenseCreate, Transaction
from services.context import AppContext
from services.transactions import FAMILY_EXPENSE_CATEGORIES

settings = get_settings()

router = APIRouter(prefix="/api/family", tags=["family"])


@router.get("/categories", response_model=list[str])
async def list_categories():
    return list(FAMILY_EXPENSE_CATEGORIES)


@router.get("/expenses", response_model=list[Transaction])
async def list_expenses(ctx: AppContext = Depends(get_context)):
    return ctx.family_expenses.all()


@router.post("/expenses", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def add_expense(data: FamilyExpenseCreate, ctx: AppContext = Depends(get_context)):
    return ctx.add_family_expense(data.description, data.amount, data.category)


@router.post("/optimize", response_model=BudgetOptimizationResult)
@limiter.limit(settings.advisory_rate_limit)
async def optimize(request: Request, ctx: AppContext = Depends(get_context)):
    """Budget optimization advice over the shared household expenses."""
    result = await ctx.optimize_family_budget()
    if isinstance(result, Failure):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)
    return result.payload
