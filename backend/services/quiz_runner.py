"""Quiz and lesson-quiz state machines.

Grading compares the user's answer with the ``answer`` field Gemini produced
alongside each question. That key is never re-derived, so a quiz can only be
as correct as the model was self-consistent when it wrote it.
"""

import logging
from typing import Optional

from config import Settings, get_settings
from schemas.advisory import Failure, QuizGeneration
from schemas.catalog import Lesson
from schemas.quiz import (
    LessonQuizResult,
    QuestionReview,
    QuestionView,
    QuizQuestion,
    QuizSnapshot,
    QuizState,
)
from services.errors import EmptyResult, QuizStateError, UserInputError
from services.progress import ProgressLedger

logger = logging.getLogger(__name__)

QUIZ_BADGE = "quiz_whiz"
PASS_THRESHOLD = 2 / 3 * 100
GENERATION_ERROR = "Could not generate a quiz. Please try again."


def _questions_from(result) -> tuple[QuizQuestion, ...]:
    if isinstance(result, Failure):
        raise EmptyResult(result.reason)
    if not result.payload.quiz:
        raise EmptyResult("AI failed to generate a valid quiz.")
    return result.payload.quiz


class QuizRunner:
    """Selecting → Loading → InProgress → Completed, and back to Selecting.

    A failed or empty generation returns to Selecting with ``error`` set.
    ``restart`` is allowed from any state; a generation still loading when
    the runner restarts is ignored when it resolves.
    """

    def __init__(
        self,
        gateway,
        ledger: ProgressLedger,
        settings: Optional[Settings] = None,
        question_count: Optional[int] = None,
    ):
        settings = settings or get_settings()
        self.gateway = gateway
        self.ledger = ledger
        self.question_count = question_count or settings.quiz_question_count
        self._generation = 0
        self._clear()

    def _clear(self) -> None:
        self.state = QuizState.SELECTING
        self.topic: Optional[str] = None
        self.error: Optional[str] = None
        self.questions: tuple[QuizQuestion, ...] = ()
        self.answers: list[Optional[str]] = []
        self.cursor = 0
        self.score: Optional[float] = None
        self.badge_awarded = False

    # ── transitions ──

    async def start(self, topic: str) -> QuizSnapshot:
        if self.state is not QuizState.SELECTING:
            raise QuizStateError(f"Cannot start a quiz while {self.state.value}")

        self._clear()
        self.state = QuizState.LOADING
        self.topic = topic
        self._generation += 1
        generation = self._generation

        result = await self.gateway.submit(
            QuizGeneration(topic=topic, question_count=self.question_count)
        )
        if generation != self._generation:
            logger.info("Discarding quiz for %r: runner was restarted", topic)
            return self.snapshot()

        try:
            questions = _questions_from(result)
        except EmptyResult as e:
            logger.warning("Quiz generation for %r failed: %s", topic, e)
            self.state = QuizState.SELECTING
            self.error = GENERATION_ERROR
            return self.snapshot()

        self.questions = questions
        self.answers = [None] * len(questions)
        self.cursor = 0
        self.state = QuizState.IN_PROGRESS
        logger.info("Quiz on %r started with %d questions", topic, len(questions))
        return self.snapshot()

    def select_answer(self, answer: str) -> QuizSnapshot:
        self._require(QuizState.IN_PROGRESS)
        if answer not in self.questions[self.cursor].options:
            raise UserInputError("Answer must be one of the options")
        self.answers[self.cursor] = answer
        return self.snapshot()

    def next(self) -> QuizSnapshot:
        self._require(QuizState.IN_PROGRESS)
        if self.answers[self.cursor] is None:
            raise QuizStateError("Select an answer before moving on")
        if self.cursor < len(self.questions) - 1:
            self.cursor += 1
            return self.snapshot()
        return self.finish()

    def finish(self) -> QuizSnapshot:
        self._require(QuizState.IN_PROGRESS)
        correct = sum(
            1 for q, a in zip(self.questions, self.answers) if a is not None and a == q.answer
        )
        self.score = correct / len(self.questions) * 100
        self.state = QuizState.COMPLETED

        if self.score >= PASS_THRESHOLD:
            self.ledger.award(QUIZ_BADGE)
            self.badge_awarded = True
        logger.info("Quiz on %r finished: %d/%d", self.topic, correct, len(self.questions))
        return self.snapshot()

    def restart(self) -> QuizSnapshot:
        self._generation += 1
        self._clear()
        return self.snapshot()

    # ── views ──

    @property
    def can_advance(self) -> bool:
        return self.state is QuizState.IN_PROGRESS and self.answers[self.cursor] is not None

    def review(self) -> list[QuestionReview]:
        self._require(QuizState.COMPLETED)
        return [
            QuestionReview(
                question=q.question,
                options=list(q.options),
                user_answer=a,
                correct_answer=q.answer,
                is_correct=a == q.answer,
            )
            for q, a in zip(self.questions, self.answers)
        ]

    def snapshot(self) -> QuizSnapshot:
        snap = QuizSnapshot(
            state=self.state,
            topic=self.topic,
            error=self.error,
            total_questions=len(self.questions),
        )
        if self.state is QuizState.IN_PROGRESS:
            q = self.questions[self.cursor]
            snap.current_index = self.cursor
            snap.current_question = QuestionView(question=q.question, options=list(q.options))
            snap.selected_answer = self.answers[self.cursor]
            snap.can_advance = self.can_advance
        elif self.state is QuizState.COMPLETED:
            snap.current_index = self.cursor
            snap.score = self.score
            snap.display_score = round(self.score)
            snap.badge_awarded = self.badge_awarded
            snap.review = self.review()
        return snap

    def _require(self, state: QuizState) -> None:
        if self.state is not state:
            raise QuizStateError(f"Quiz is {self.state.value}, expected {state.value}")


class LessonQuiz:
    """Single-question inline quiz for a lesson.

    A correct answer awards the lesson's badge straight away; there is no
    score threshold.
    """

    def __init__(self, lesson: Lesson, gateway, ledger: ProgressLedger):
        self.lesson = lesson
        self.gateway = gateway
        self.ledger = ledger
        self.question: Optional[QuizQuestion] = None
        self.error: Optional[str] = None

    async def generate(self) -> Optional[QuizQuestion]:
        self.question = None
        self.error = None
        result = await self.gateway.submit(
            QuizGeneration(topic=self.lesson.quiz_topic, question_count=1)
        )
        try:
            self.question = _questions_from(result)[0]
        except EmptyResult as e:
            logger.warning("Lesson quiz for %s failed: %s", self.lesson.id, e)
            self.error = GENERATION_ERROR
        return self.question

    def submit(self, answer: str) -> LessonQuizResult:
        if self.question is None:
            raise QuizStateError("No question has been generated for this lesson")
        if answer not in self.question.options:
            raise UserInputError("Answer must be one of the options")

        correct = answer == self.question.answer
        awarded = None
        if correct:
            self.ledger.award(self.lesson.badge_to_award)
            awarded = self.lesson.badge_to_award
        return LessonQuizResult(
            lesson_id=self.lesson.id,
            correct=correct,
            correct_answer=self.question.answer,
            badge_awarded=awarded,
        )
