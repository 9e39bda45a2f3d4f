"""
CoinCoach - Financial Literacy Coaching API
Cohort-aware money coaching powered by Gemini: streamed chat, advisory
tools, quizzes, lessons, badges and an expense tracker.
"""
import logging
import json
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import get_settings
from dependencies import limiter
from routers import (
    profile_router,
    advisory_router,
    chat_router,
    quizzes_router,
    lessons_router,
    progress_router,
    transactions_router,
    family_router,
)
from services.context import AppContext
from services.errors import (
    ProfileNotSelectedError,
    QuizStateError,
    SendInProgressError,
    SessionClosedError,
    UserInputError,
)

settings = get_settings()


# ── Structured JSON Logging ─────────────────────────────────────────
class JSONFormatter(logging.Formatter):
    def format(self, record):
        log = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "call_type"):
            log["call_type"] = record.call_type
        return json.dumps(log)


def setup_logging():
    """Route every app logger through one JSON handler on stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


logger = logging.getLogger("coincoach")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting CoinCoach API (model=%s)", settings.gemini_model)
    app.state.context = AppContext(settings=settings)
    yield
    app.state.context.teardown_session()
    app.state.context.suggestions.close()
    logger.info("Shutting down CoinCoach API")


OPENAPI_TAGS = [
    {"name": "profile", "description": "Cohort selection and reset"},
    {"name": "advisory", "description": "One-shot structured advice: loans, goals, tax, retirement and more"},
    {"name": "chat", "description": "Cohort-specific coaching chat with streamed (SSE) replies"},
    {"name": "quizzes", "description": "Generated multiple-choice quizzes"},
    {"name": "lessons", "description": "Static lessons with inline single-question quizzes"},
    {"name": "progress", "description": "Earned badges"},
    {"name": "transactions", "description": "Expense tracker with debounced category suggestions"},
    {"name": "family", "description": "Shared household expenses and budget optimization"},
    {"name": "ops", "description": "Health checks"},
]

app = FastAPI(
    title="CoinCoach API",
    description="Financial literacy coaching for teens, young adults, adults and seniors.",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ── Domain errors → HTTP ────────────────────────────────────────────
@app.exception_handler(UserInputError)
async def user_input_error_handler(request: Request, exc: UserInputError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


async def conflict_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


for _exc in (QuizStateError, SendInProgressError, SessionClosedError, ProfileNotSelectedError):
    app.add_exception_handler(_exc, conflict_handler)


app.include_router(profile_router)
app.include_router(advisory_router)
app.include_router(chat_router)
app.include_router(quizzes_router)
app.include_router(lessons_router)
app.include_router(progress_router)
app.include_router(transactions_router)
app.include_router(family_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    if not request.url.path.startswith("/health"):
        logger.info(
            "%s %s %d %.0fms",
            request.method, request.url.path, response.status_code, duration_ms,
        )
    return response


@app.get("/", tags=["ops"])
async def root():
    return {
        "name": "CoinCoach API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", tags=["ops"])
async def health_check():
    """Readiness probe. Reports the configured model and whether a profile is active."""
    ctx = getattr(app.state, "context", None)
    checks = {
        "api": "ok",
        "gemini_model": settings.gemini_model,
        "profile": ctx.cohort.value if ctx is not None and ctx.cohort is not None else None,
    }
    return {"status": "healthy", "service": "coincoach-api", "version": "1.0.0", "checks": checks}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
