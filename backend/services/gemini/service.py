"""AdvisoryGateway: the single choke point for structured Gemini calls."""

import asyncio
from typing import Optional

from google import genai
from pydantic import BaseModel, ValidationError

from config import Settings, get_settings
from schemas.advisory import (
    AdvisoryResult,
    Failure,
    LessonRecommendation,
    LessonRecommendationResult,
    Success,
)
from schemas.catalog import Lesson
from services.catalog import get_lessons
from services.errors import SchemaViolation, TransportError
from services.gemini.helpers import json_config, logger, make_client
from services.gemini.prompts import build_prompt, lesson_recommendation_prompt

ALL_LESSONS_DONE = "You've completed all the lessons! Great job!"


class AdvisoryGateway:
    """Turns typed advisory requests into validated typed results.

    ``submit`` always resolves and never raises. Transport failures, timeouts,
    malformed JSON and schema mismatches all come back as ``Failure`` with the
    request's user-facing reason. There is no automatic retry; callers
    re-submit if they want one. The gateway holds no state between calls.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        settings: Optional[Settings] = None,
        lessons: Optional[list[Lesson]] = None,
    ):
        settings = settings or get_settings()
        self.client = client or make_client(settings)
        self.model_name = settings.gemini_model
        self.timeout = settings.advisory_timeout_seconds
        self._lessons = lessons

    @property
    def lessons(self) -> list[Lesson]:
        return self._lessons if self._lessons is not None else get_lessons()

    async def submit(self, request) -> AdvisoryResult:
        kind = request.kind
        log_extra = {"call_type": kind}
        try:
            if isinstance(request, LessonRecommendation):
                payload = await self._recommend_lesson(request)
            else:
                payload = await self._call_gemini(
                    build_prompt(request), request.result_model, call_type=kind
                )
        except (TransportError, SchemaViolation) as e:
            logger.warning(
                "Advisory call [%s] failed: %s: %s", kind, type(e).__name__, e, extra=log_extra
            )
            return Failure(reason=request.failure_reason)
        except Exception:
            logger.exception("Unexpected error in advisory call [%s]", kind, extra=log_extra)
            return Failure(reason=request.failure_reason)

        logger.info("Advisory call [%s] succeeded", kind, extra=log_extra)
        return Success(payload=payload)

    # ── Low-level Gemini call with timeout + strict schema validation ──

    async def _call_gemini(
        self,
        prompt: str,
        response_schema: type[BaseModel],
        call_type: str,
    ) -> BaseModel:
        """
        Single Gemini call bounded by ``advisory_timeout_seconds``. The
        response is parsed strictly against ``response_schema``: no string to
        number coercion, every required field present. Raises TransportError
        or SchemaViolation.
        """
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.models.generate_content,
                    model=self.model_name,
                    contents=prompt,
                    config=json_config(response_schema),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"Gemini call timed out after {self.timeout}s") from e
        except Exception as e:
            raise TransportError(str(e)) from e

        raw_text = (getattr(response, "text", None) or "").strip()
        if not raw_text:
            raise SchemaViolation(f"empty response body for {call_type}")

        try:
            return response_schema.model_validate_json(raw_text, strict=True)
        except ValidationError as e:
            raise SchemaViolation(
                f"{call_type} response failed validation ({e.error_count()} errors)"
            ) from e

    async def _recommend_lesson(self, request: LessonRecommendation) -> LessonRecommendationResult:
        completed = set(request.completed_lesson_ids)
        available = [l for l in self.lessons if l.id not in completed]
        if not available:
            return LessonRecommendationResult(recommended_lesson_id="", reason=ALL_LESSONS_DONE)

        result = await self._call_gemini(
            lesson_recommendation_prompt(request, available),
            LessonRecommendationResult,
            call_type=request.kind,
        )
        if result.recommended_lesson_id not in {l.id for l in available}:
            raise SchemaViolation(
                f"recommended unknown or completed lesson {result.recommended_lesson_id!r}"
            )
        return result
