"""Process-scoped root state for the coaching app.

The context is the single owner of the cohort selection, the progress ledger,
the chat session manager, the quiz runner, per-lesson inline quizzes, the
expense suggestion controller and the transaction book. Routers reach it
through a FastAPI dependency; nothing else holds a second reference to the
ledger or the active chat session.
"""

import logging
from typing import Optional

from cachetools import TTLCache

from config import Settings, get_settings
from schemas.advisory import (
    AdvisoryResult,
    BudgetOptimization,
    CreditTips,
    HealthScore,
    LoanEligibility,
    PortfolioAdvice,
    RetirementReadiness,
    Success,
    TaxEstimate,
    WithdrawalSustainability,
)
from schemas.catalog import Cohort
from schemas.finance import Transaction, TransactionStatus
from services.catalog import get_lesson
from services.chat_session import ChatSession, StreamingSessionManager
from services.errors import ProfileNotSelectedError, UserInputError
from services.gemini import AdvisoryGateway, make_client
from services.progress import ProgressLedger
from services.quiz_runner import LessonQuiz, QuizRunner
from services.suggestions import DebouncedSuggestionController
from services.transactions import FAMILY_EXPENSE_CATEGORIES, TransactionBook

logger = logging.getLogger(__name__)

FAMILY_BADGE = "family_budget_planner"

# Badge earned the first time each advisory tool returns a result
TOOL_BADGES: dict[type, str] = {
    LoanEligibility: "loan_savvy",
    CreditTips: "credit_builder",
    WithdrawalSustainability: "withdrawal_planner_user",
    HealthScore: "health_score_checker",
    TaxEstimate: "tax_savvy",
    BudgetOptimization: "budget_optimizer",
    RetirementReadiness: "retirement_ready",
    PortfolioAdvice: "investment_initiate",
}


class AppContext:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client=None,
        gateway: Optional[AdvisoryGateway] = None,
    ):
        self.settings = settings or get_settings()
        client = client or make_client(self.settings)
        self.gateway = gateway or AdvisoryGateway(client=client, settings=self.settings)
        self.chat = StreamingSessionManager(client=client, settings=self.settings)

        self.cohort: Optional[Cohort] = None
        self.ledger = ProgressLedger()
        self._init_profile_state()

    def _init_profile_state(self) -> None:
        self.quiz = QuizRunner(self.gateway, self.ledger, settings=self.settings)
        self.lesson_quizzes: TTLCache = TTLCache(maxsize=64, ttl=3600)
        self.suggestions = DebouncedSuggestionController(self.gateway, settings=self.settings)
        self.transactions = TransactionBook()
        self.family_expenses = TransactionBook(categories=FAMILY_EXPENSE_CATEGORIES)

    # ── lifecycle ──

    def init_profile(self, cohort: Cohort) -> ChatSession:
        """Select a cohort. Starts a fresh chat session; other state is kept."""
        self.cohort = cohort
        session = self.chat.start(cohort)
        logger.info("Profile selected: %s", cohort.value)
        return session

    def teardown_session(self) -> None:
        self.chat.teardown()

    def reset_profile(self) -> None:
        """Back to cohort selection. Earned badges survive; everything else is dropped."""
        self.teardown_session()
        self.suggestions.close()
        self.cohort = None
        self._init_profile_state()
        logger.info("Profile reset")

    # ── accessors ──

    def require_cohort(self) -> Cohort:
        if self.cohort is None:
            raise ProfileNotSelectedError("Select an age group first")
        return self.cohort

    def require_session(self) -> ChatSession:
        self.require_cohort()
        session = self.chat.active
        if session is None:
            raise ProfileNotSelectedError("No active chat session")
        return session

    def lesson_quiz(self, lesson_id: str) -> LessonQuiz:
        quiz = self.lesson_quizzes.get(lesson_id)
        if quiz is None:
            lesson = get_lesson(lesson_id)
            if lesson is None:
                raise KeyError(lesson_id)
            quiz = LessonQuiz(lesson, self.gateway, self.ledger)
            self.lesson_quizzes[lesson_id] = quiz
        return quiz

    # ── family budget ──

    def add_family_expense(self, description: str, amount: float, category: str) -> Transaction:
        """Record a shared household expense; the first one earns the family badge."""
        txn = self.family_expenses.add(
            description, amount, category=category, status=TransactionStatus.CONFIRMED
        )
        self.ledger.award(FAMILY_BADGE)
        return txn

    async def optimize_family_budget(self) -> AdvisoryResult:
        items = self.family_expenses.spend_items()
        if not items:
            raise UserInputError("Add a family expense first")
        return await self.advise(BudgetOptimization(transactions=items))

    # ── advisory ──

    async def advise(self, request) -> AdvisoryResult:
        """Submit through the gateway and award the tool's badge on success."""
        result = await self.gateway.submit(request)
        badge = TOOL_BADGES.get(type(request))
        if badge and isinstance(result, Success):
            self.ledger.award(badge)
        return result
