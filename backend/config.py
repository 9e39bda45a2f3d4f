from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Gemini API (required: the app refuses to start without a key)
    gemini_api_key: str
    gemini_model: str = "gemini-2.5-flash"
    advisory_timeout_seconds: float = 30.0
    chat_chunk_timeout_seconds: float = 30.0

    # Suggestion debouncing
    suggestion_debounce_ms: int = 500
    suggestion_min_length: int = 3

    # Quizzes
    quiz_question_count: int = 3

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # Rate limits (slowapi syntax)
    advisory_rate_limit: str = "30/minute"
    chat_rate_limit: str = "20/minute"
    trend_rate_limit: str = "10/minute"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("gemini_api_key")
    @classmethod
    def _key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("GEMINI_API_KEY environment variable is not set")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()
