import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from config import get_settings
from dependencies import get_context, limiter
from schemas.chat import ChatSend, Transcript
from services.context import AppContext

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.get("/transcript", response_model=Transcript)
async def get_transcript(ctx: AppContext = Depends(get_context)):
    session = ctx.require_session()
    return Transcript(
        cohort=session.cohort.value,
        messages=session.messages,
        in_flight=session.in_flight,
    )


@router.post("/messages")
@limiter.limit(settings.chat_rate_limit)
async def send_message(
    request: Request,
    data: ChatSend,
    ctx: AppContext = Depends(get_context),
):
    """Send a message and stream the assistant's reply as Server-Sent Events.

    Each ``data:`` event carries one text delta. The final ``complete`` event
    carries the finished assistant message, which holds the apology text if
    the stream broke partway.
    """
    session = ctx.require_session()
    # Raises before the response starts, so busy/closed/empty map to 409/422
    deltas = ctx.chat.send(session, data.message)
    reply = session.last_message

    async def event_generator():
        try:
            async for delta in deltas:
                yield f"data: {json.dumps({'delta': delta})}\n\n"
        finally:
            await deltas.aclose()
        yield f"event: complete\ndata: {json.dumps(reply.model_dump(mode='json'))}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        # Runs after the response even on early disconnect, so the session is released
        background=BackgroundTask(deltas.aclose),
    )
