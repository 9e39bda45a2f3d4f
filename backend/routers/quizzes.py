from fastapi import APIRouter, Depends

from dependencies import get_context
from schemas.quiz import AnswerSelection, QuizSnapshot, QuizStart
from services.context import AppContext

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


@router.get("", response_model=QuizSnapshot)
async def get_quiz(ctx: AppContext = Depends(get_context)):
    return ctx.quiz.snapshot()


@router.post("/start", response_model=QuizSnapshot)
async def start_quiz(data: QuizStart, ctx: AppContext = Depends(get_context)):
    """Generate a quiz on ``topic``. On failure the snapshot is back in
    ``selecting`` with ``error`` set."""
    ctx.require_cohort()
    return await ctx.quiz.start(data.topic)


@router.post("/answer", response_model=QuizSnapshot)
async def select_answer(data: AnswerSelection, ctx: AppContext = Depends(get_context)):
    return ctx.quiz.select_answer(data.answer)


@router.post("/next", response_model=QuizSnapshot)
async def next_question(ctx: AppContext = Depends(get_context)):
    return ctx.quiz.next()


@router.post("/restart", response_model=QuizSnapshot)
async def restart_quiz(ctx: AppContext = Depends(get_context)):
    return ctx.quiz.restart()
