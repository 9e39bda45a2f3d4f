from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FinancialGoal(BaseModel):
    """A savings goal supplied by the user."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(..., ge=0)
    monthly_contribution: float = Field(..., ge=0)
    deadline: date


class TransactionStatus(str, Enum):
    PENDING = "pending"      # AI-suggested category not yet reviewed
    CONFIRMED = "confirmed"  # accepted or overridden by the user


class Transaction(BaseModel):
    id: str
    description: str
    amount: float
    category: str
    date: datetime
    status: TransactionStatus = TransactionStatus.PENDING


class TransactionCreate(BaseModel):
    # Validated by TransactionBook, not here, so bad input raises UserInputError
    description: str
    amount: float


class FamilyExpenseCreate(BaseModel):
    description: str
    amount: float
    category: str = "Groceries"


class CategoryUpdate(BaseModel):
    category: str


class SpendItem(BaseModel):
    """Compact transaction view sent to Gemini for trend/budget analysis."""
    model_config = ConfigDict(frozen=True)

    date: str
    category: str
    amount: float


class Holding(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: float = Field(..., ge=0)


class SuggestionInput(BaseModel):
    text: str


class SuggestionState(BaseModel):
    text: str
    suggestion: Optional[str] = None
    is_suggesting: bool = False
