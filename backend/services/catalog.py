"""Read-only access to the static badge, lesson and cohort catalog."""
import json
from pathlib import Path
from typing import Optional

from schemas.catalog import Badge, Cohort, CohortProfile, Lesson

DATA_DIR = Path(__file__).parent.parent / "data"

# Loaded lazily from data/*.json
_badges: Optional[dict[str, Badge]] = None
_lessons: Optional[list[Lesson]] = None
_cohorts: Optional[dict[Cohort, CohortProfile]] = None


def _load(name: str) -> list[dict]:
    with open(DATA_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def get_badges() -> dict[str, Badge]:
    global _badges
    if _badges is None:
        _badges = {b["id"]: Badge(**b) for b in _load("badges.json")}
    return _badges


def get_lessons() -> list[Lesson]:
    global _lessons
    if _lessons is None:
        _lessons = [Lesson(**l) for l in _load("lessons.json")]
    return _lessons


def get_lesson(lesson_id: str) -> Optional[Lesson]:
    return next((l for l in get_lessons() if l.id == lesson_id), None)


def get_cohort(cohort: Cohort) -> CohortProfile:
    global _cohorts
    if _cohorts is None:
        profiles = [CohortProfile(**c) for c in _load("cohorts.json")]
        _cohorts = {p.id: p for p in profiles}
    return _cohorts[cohort]
