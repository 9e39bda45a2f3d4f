import logging

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_context
from schemas.advisory import Failure, LessonRecommendation, LessonRecommendationResult
from schemas.catalog import LessonView
from schemas.quiz import AnswerSelection, LessonQuizResult, QuestionView
from services.catalog import get_lesson, get_lessons
from services.context import AppContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


def _completed_ids(ctx: AppContext) -> list[str]:
    # A lesson counts as completed once its badge is earned
    return [l.id for l in get_lessons() if l.badge_to_award in ctx.ledger]


@router.get("", response_model=list[LessonView])
async def list_lessons(ctx: AppContext = Depends(get_context)):
    done = set(_completed_ids(ctx))
    return [LessonView(**l.model_dump(), completed=l.id in done) for l in get_lessons()]


@router.get("/recommendation", response_model=LessonRecommendationResult)
async def recommend_lesson(ctx: AppContext = Depends(get_context)):
    """Suggest the next lesson from those not yet completed."""
    result = await ctx.advise(LessonRecommendation(completed_lesson_ids=tuple(_completed_ids(ctx))))
    if isinstance(result, Failure):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)
    return result.payload


@router.get("/{lesson_id}", response_model=LessonView)
async def get_lesson_detail(lesson_id: str, ctx: AppContext = Depends(get_context)):
    lesson = get_lesson(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")
    return LessonView(**lesson.model_dump(), completed=lesson.badge_to_award in ctx.ledger)


@router.post("/{lesson_id}/quiz", response_model=QuestionView)
async def generate_lesson_quiz(lesson_id: str, ctx: AppContext = Depends(get_context)):
    try:
        quiz = ctx.lesson_quiz(lesson_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")

    question = await quiz.generate()
    if question is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=quiz.error)
    return QuestionView(question=question.question, options=list(question.options))


@router.post("/{lesson_id}/quiz/answer", response_model=LessonQuizResult)
async def answer_lesson_quiz(
    lesson_id: str,
    data: AnswerSelection,
    ctx: AppContext = Depends(get_context),
):
    try:
        quiz = ctx.lesson_quiz(lesson_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")
    return quiz.submit(data.answer)
