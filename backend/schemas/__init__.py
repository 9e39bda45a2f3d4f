from schemas.advisory import (
    AdvisoryRequest,
    AdvisoryBody,
    AdvisoryResult,
    Success,
    Failure,
    EXPENSE_CATEGORIES
)
from schemas.catalog import (
    Cohort,
    CohortProfile,
    Badge,
    Lesson,
    LessonView,
    ProfileSelect,
    ProgressResponse
)
from schemas.chat import (
    Sender,
    ChatMessage,
    ChatSend,
    Transcript
)
from schemas.quiz import (
    QuizQuestion,
    QuizSet,
    QuizState,
    QuizSnapshot,
    LessonQuizResult
)
from schemas.finance import (
    FinancialGoal,
    Holding,
    SpendItem,
    Transaction,
    TransactionCreate,
    TransactionStatus
)

__all__ = [
    # Advisory
    "AdvisoryRequest", "AdvisoryBody", "AdvisoryResult", "Success", "Failure", "EXPENSE_CATEGORIES",
    # Catalog
    "Cohort", "CohortProfile", "Badge", "Lesson", "LessonView", "ProfileSelect", "ProgressResponse",
    # Chat
    "Sender", "ChatMessage", "ChatSend", "Transcript",
    # Quiz
    "QuizQuestion", "QuizSet", "QuizState", "QuizSnapshot", "LessonQuizResult",
    # Finance
    "FinancialGoal", "Holding", "SpendItem", "Transaction", "TransactionCreate", "TransactionStatus"
]
