from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuizQuestion(BaseModel):
    """A single multiple-choice question authored by Gemini.

    The ``answer`` key comes from the same untrusted call that wrote the
    question and is never re-derived; grading is only as good as the model's
    self-consistency. The object is frozen so the key cannot drift after
    validation.
    """
    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1)
    options: tuple[str, ...]
    answer: str

    @model_validator(mode="after")
    def _check_options(self) -> "QuizQuestion":
        if len(self.options) != 4:
            raise ValueError(f"expected 4 options, got {len(self.options)}")
        if len(set(self.options)) != 4:
            raise ValueError("options must be distinct")
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class QuizSet(BaseModel):
    """Gemini output for QuizGeneration. May be empty; callers decide."""
    model_config = ConfigDict(frozen=True)

    quiz: tuple[QuizQuestion, ...]


class QuizState(str, Enum):
    SELECTING = "selecting"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuizStart(BaseModel):
    topic: str = Field(..., min_length=1)


class AnswerSelection(BaseModel):
    answer: str


class QuestionView(BaseModel):
    """A question as shown while the quiz is running (no answer key)."""
    question: str
    options: list[str]


class QuestionReview(BaseModel):
    question: str
    options: list[str]
    user_answer: Optional[str] = None
    correct_answer: str
    is_correct: bool


class QuizSnapshot(BaseModel):
    """Externally visible state of the quiz runner."""
    state: QuizState
    topic: Optional[str] = None
    error: Optional[str] = None
    current_index: int = 0
    total_questions: int = 0
    current_question: Optional[QuestionView] = None
    selected_answer: Optional[str] = None
    can_advance: bool = False
    score: Optional[float] = None
    display_score: Optional[int] = None
    badge_awarded: bool = False
    review: list[QuestionReview] = []


class LessonQuizResult(BaseModel):
    lesson_id: str
    correct: bool
    correct_answer: str
    badge_awarded: Optional[str] = None
