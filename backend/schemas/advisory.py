"""Request/response contracts for every advisory operation.

Requests are frozen pydantic models tagged by ``kind``; ``AdvisoryRequest`` is
the discriminated union of all of them. Each request class names the result
model Gemini must satisfy (``result_model``) and the user-facing reason shown
when the call fails (``failure_reason``).
"""
from dataclasses import dataclass
from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel

from schemas.finance import FinancialGoal, Holding, SpendItem
from schemas.quiz import QuizSet


EXPENSE_CATEGORIES = (
    "Food & Drinks",
    "Shopping",
    "Transport",
    "Bills",
    "Entertainment",
    "Health",
    "Other",
)

ExpenseCategory = Literal[
    "Food & Drinks", "Shopping", "Transport", "Bills", "Entertainment", "Health", "Other"
]


# ── Result payloads (what Gemini must return) ─────────────────────────────

class LoanEligibilityResult(BaseModel):
    eligibility: Literal["Eligible", "Not Eligible"]
    confidence_score: float = Field(..., ge=0, le=100)
    explanation: str
    monthly_payment: float
    max_loan_amount: float


class GoalProjectionResult(BaseModel):
    likelihood: float = Field(..., ge=0, le=100)
    predicted_date: str = Field(..., pattern=r"^\d{4}-\d{2}$")  # YYYY-MM
    suggestions: list[str]


class RetirementReadinessResult(BaseModel):
    readiness_score: float = Field(..., ge=0, le=100)
    predicted_corpus: float
    suggestions: list[str]


class TaxBreakdown(BaseModel):
    income_tax: float
    surcharge: float


class TaxEstimateResult(BaseModel):
    estimated_tax: float
    effective_tax_rate: float
    breakdown: TaxBreakdown
    tips: list[str]


class CreditTipsResult(BaseModel):
    tips: list[str] = Field(..., min_length=1)


class InsuranceRecommendation(BaseModel):
    type: str
    reason: str


class InsuranceAdviceResult(BaseModel):
    recommendations: list[InsuranceRecommendation]


class PortfolioAdviceResult(BaseModel):
    suggestions: list[str]


class WithdrawalSustainabilityResult(BaseModel):
    is_sustainable: bool
    funds_deplete_age: float  # 999 when sustainable
    suggestion: str


class HealthScoreResult(BaseModel):
    score: float = Field(..., ge=0, le=100)
    summary: str
    suggestions: list[str]


class BudgetOptimizationResult(BaseModel):
    suggested_savings_ratio: float
    advice: str


class CategorySuggestionResult(BaseModel):
    category: ExpenseCategory


class FraudTipResult(BaseModel):
    tip: str


class FinancialFactResult(BaseModel):
    fact: str


class LessonRecommendationResult(BaseModel):
    recommended_lesson_id: str
    reason: str


class HealthcareCostBreakdown(BaseModel):
    premiums: float
    medication: float
    out_of_pocket: float


class HealthcareCostResult(BaseModel):
    predicted_annual_cost: float
    cost_breakdown: HealthcareCostBreakdown
    suggestion: str


class StudentLoanAdviceResult(BaseModel):
    monthly_payment: float
    summary: str
    tips: list[str]


class SpendingTrendResult(BaseModel):
    summary: str


class BudgetingAdviceResult(BaseModel):
    advice: str


# ── Requests ──────────────────────────────────────────────────────────────

class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    result_model: ClassVar[type[BaseModel]]
    failure_reason: ClassVar[str] = "Failed to get a response from the AI model."


class LoanEligibility(_Request):
    kind: Literal["loan_eligibility"] = "loan_eligibility"
    age: int = Field(..., ge=18, le=120)
    monthly_income: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)
    loan_amount: float = Field(..., gt=0)
    credit_score: int = Field(..., ge=300, le=900)

    result_model: ClassVar = LoanEligibilityResult
    failure_reason: ClassVar = "Failed to get prediction from AI model."


class GoalProjection(_Request):
    kind: Literal["goal_projection"] = "goal_projection"
    goal: FinancialGoal

    result_model: ClassVar = GoalProjectionResult
    failure_reason: ClassVar = "Failed to get goal prediction from AI model."


class RetirementReadiness(_Request):
    kind: Literal["retirement_readiness"] = "retirement_readiness"
    age: int = Field(..., ge=0, le=120)
    current_savings: float = Field(..., ge=0)
    monthly_contribution: float = Field(..., ge=0)

    result_model: ClassVar = RetirementReadinessResult
    failure_reason: ClassVar = "Failed to get retirement prediction."


class TaxEstimate(_Request):
    kind: Literal["tax_estimate"] = "tax_estimate"
    annual_income: float = Field(..., ge=0)
    annual_deductions: float = Field(0, ge=0)

    result_model: ClassVar = TaxEstimateResult
    failure_reason: ClassVar = "Failed to get tax estimation."


class CreditTips(_Request):
    kind: Literal["credit_tips"] = "credit_tips"
    credit_score: int = Field(..., ge=300, le=900)

    result_model: ClassVar = CreditTipsResult
    failure_reason: ClassVar = "Failed to get credit score tips from AI model."


class InsuranceAdvice(_Request):
    kind: Literal["insurance_advice"] = "insurance_advice"
    has_family: bool
    owns_home: bool

    result_model: ClassVar = InsuranceAdviceResult
    failure_reason: ClassVar = "Failed to get insurance advice."


class PortfolioAdvice(_Request):
    kind: Literal["portfolio_advice"] = "portfolio_advice"
    holdings: tuple[Holding, ...] = Field(..., min_length=1)

    result_model: ClassVar = PortfolioAdviceResult
    failure_reason: ClassVar = "Failed to get portfolio advice."


class WithdrawalSustainability(_Request):
    kind: Literal["withdrawal_sustainability"] = "withdrawal_sustainability"
    corpus: float = Field(..., ge=0)
    monthly_withdrawal: float = Field(..., ge=0)
    age: int = Field(..., ge=0, le=120)

    result_model: ClassVar = WithdrawalSustainabilityResult
    failure_reason: ClassVar = "Failed to get withdrawal prediction."


class HealthScore(_Request):
    kind: Literal["health_score"] = "health_score"
    monthly_income: float = Field(..., ge=0)
    savings: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)

    result_model: ClassVar = HealthScoreResult
    failure_reason: ClassVar = "Failed to get financial health score."


class BudgetOptimization(_Request):
    kind: Literal["budget_optimization"] = "budget_optimization"
    transactions: tuple[SpendItem, ...] = Field(..., min_length=1)

    result_model: ClassVar = BudgetOptimizationResult
    failure_reason: ClassVar = "Failed to get budget advice."


class QuizGeneration(_Request):
    kind: Literal["quiz_generation"] = "quiz_generation"
    topic: str = Field(..., min_length=1)
    question_count: int = Field(1, ge=1, le=10)

    result_model: ClassVar = QuizSet
    failure_reason: ClassVar = "Failed to generate quiz from AI model."


class CategorySuggestion(_Request):
    kind: Literal["category_suggestion"] = "category_suggestion"
    description: str = Field(..., min_length=1)

    result_model: ClassVar = CategorySuggestionResult
    failure_reason: ClassVar = "Failed to suggest a category."


class FraudTip(_Request):
    kind: Literal["fraud_tip"] = "fraud_tip"

    result_model: ClassVar = FraudTipResult
    failure_reason: ClassVar = "Failed to get fraud tip from AI model."


class FinancialFact(_Request):
    kind: Literal["financial_fact"] = "financial_fact"

    result_model: ClassVar = FinancialFactResult
    failure_reason: ClassVar = "Failed to get financial fact."


class LessonRecommendation(_Request):
    kind: Literal["lesson_recommendation"] = "lesson_recommendation"
    completed_lesson_ids: tuple[str, ...] = ()

    result_model: ClassVar = LessonRecommendationResult
    failure_reason: ClassVar = "Failed to get lesson recommendation."


class HealthcareCost(_Request):
    kind: Literal["healthcare_cost"] = "healthcare_cost"
    age: int = Field(..., ge=0, le=120)

    result_model: ClassVar = HealthcareCostResult
    failure_reason: ClassVar = "Failed to get healthcare prediction from AI model."


class StudentLoanAdvice(_Request):
    kind: Literal["student_loan_advice"] = "student_loan_advice"
    amount: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, le=100)

    result_model: ClassVar = StudentLoanAdviceResult
    failure_reason: ClassVar = "Failed to get student loan advice from AI model."


class SpendingTrend(_Request):
    kind: Literal["spending_trend"] = "spending_trend"
    transactions: tuple[SpendItem, ...] = Field(..., min_length=1)

    result_model: ClassVar = SpendingTrendResult
    failure_reason: ClassVar = "Failed to get spending trend summary from AI model."


class BudgetingAdvice(_Request):
    kind: Literal["budgeting_advice"] = "budgeting_advice"
    needs: float = Field(..., ge=0)
    wants: float = Field(..., ge=0)
    savings: float = Field(..., ge=0)

    result_model: ClassVar = BudgetingAdviceResult
    failure_reason: ClassVar = "Failed to get budgeting advice."


AdvisoryRequest = Annotated[
    Union[
        LoanEligibility,
        GoalProjection,
        RetirementReadiness,
        TaxEstimate,
        CreditTips,
        InsuranceAdvice,
        PortfolioAdvice,
        WithdrawalSustainability,
        HealthScore,
        BudgetOptimization,
        QuizGeneration,
        CategorySuggestion,
        FraudTip,
        FinancialFact,
        LessonRecommendation,
        HealthcareCost,
        StudentLoanAdvice,
        SpendingTrend,
        BudgetingAdvice,
    ],
    Field(discriminator="kind"),
]


class AdvisoryBody(RootModel[AdvisoryRequest]):
    """HTTP body wrapper; `kind` picks the variant."""


# ── Results ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Success:
    """A fully validated payload. ``payload`` is an instance of the request's ``result_model``."""
    payload: BaseModel

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Advisory call failed; ``reason`` is safe to show the user."""
    reason: str

    @property
    def ok(self) -> bool:
        return False


AdvisoryResult = Union[Success, Failure]
