from routers.profile import router as profile_router
from routers.advisory import router as advisory_router
from routers.chat import router as chat_router
from routers.quizzes import router as quizzes_router
from routers.lessons import router as lessons_router
from routers.progress import router as progress_router
from routers.transactions import router as transactions_router
from routers.family import router as family_router

__all__ = [
    "profile_router",
    "advisory_router",
    "chat_router",
    "quizzes_router",
    "lessons_router",
    "progress_router",
    "transactions_router",
    "family_router",
]
