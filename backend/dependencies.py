"""Shared FastAPI dependencies."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from services.context import AppContext

# Rate limiter: keyed by client IP
limiter = Limiter(key_func=get_remote_address)


def get_context(request: Request) -> AppContext:
    """The process-wide AppContext created in the app lifespan."""
    return request.app.state.context
