from enum import Enum

from pydantic import BaseModel


class Cohort(str, Enum):
    """Age-based user segment."""
    TEEN = "Teen"
    YOUNG_ADULT = "YoungAdult"
    ADULT = "Adult"
    SENIOR = "Senior"


class CohortProfile(BaseModel):
    id: Cohort
    title: str
    age_range: str
    system_instruction: str  # persona/tone directive for the chat session
    welcome_message: str     # seeded into the transcript, no network call


class Badge(BaseModel):
    id: str
    name: str
    description: str


class Lesson(BaseModel):
    id: str
    title: str
    content: list[str]
    quiz_topic: str
    badge_to_award: str


class ProfileSelect(BaseModel):
    cohort: Cohort


class ProgressResponse(BaseModel):
    earned: list[Badge]
    total_available: int


class LessonView(Lesson):
    completed: bool = False
