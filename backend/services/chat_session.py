"""Cohort-scoped chat sessions with incremental (streamed) replies."""

import asyncio
import logging
from typing import AsyncIterator, Optional

from google import genai

from config import Settings, get_settings
from schemas.catalog import Cohort, CohortProfile
from schemas.chat import ChatMessage, Sender
from services.catalog import get_cohort
from services.errors import SendInProgressError, SessionClosedError, UserInputError
from services.gemini.helpers import chat_config, make_client

logger = logging.getLogger(__name__)

CHAT_ERROR_TEXT = "Sorry, I encountered an error."


class ChatSession:
    """One live conversation for a cohort.

    The transcript is append-only. At most one assistant message is
    ``streaming`` at a time, and only while a send is in flight.
    """

    def __init__(self, profile: CohortProfile, chat):
        self.cohort: Cohort = profile.id
        self.system_instruction = profile.system_instruction
        self._chat = chat
        self.messages: list[ChatMessage] = [
            ChatMessage(sender=Sender.ASSISTANT, text=profile.welcome_message)
        ]
        self.in_flight = False
        self.closed = False

    @property
    def last_message(self) -> ChatMessage:
        return self.messages[-1]


class StreamingSessionManager:
    """Owns the single active ChatSession.

    ``start`` replaces whatever session was active; the old one is closed and
    rejects further sends. ``send`` is single-flight per session.
    """

    def __init__(self, client: Optional[genai.Client] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.client = client or make_client(settings)
        self.model_name = settings.gemini_model
        self.chunk_timeout = settings.chat_chunk_timeout_seconds
        self._active: Optional[ChatSession] = None

    @property
    def active(self) -> Optional[ChatSession]:
        return self._active

    def start(self, cohort: Cohort) -> ChatSession:
        profile = get_cohort(cohort)
        self.teardown()
        chat = self.client.aio.chats.create(
            model=self.model_name,
            config=chat_config(profile.system_instruction),
        )
        self._active = ChatSession(profile, chat)
        logger.info("Chat session started for cohort %s", cohort.value)
        return self._active

    def teardown(self) -> None:
        if self._active is not None:
            self._active.closed = True
            logger.info("Chat session torn down for cohort %s", self._active.cohort.value)
            self._active = None

    def send(self, session: ChatSession, user_text: str) -> "ReplyStream":
        """Append the user's message and return the reply's text deltas.

        Checks and transcript updates happen immediately, before the first
        chunk is awaited, so a second call made while the returned stream is
        still live is rejected. Consuming the stream to completion or calling
        its ``aclose`` releases the session, even if no chunk was ever read.
        """
        if session.closed:
            raise SessionClosedError("Chat session has ended; select a profile again")
        if session.in_flight:
            raise SendInProgressError("A reply is still streaming")
        text = (user_text or "").strip()
        if not text:
            raise UserInputError("Message cannot be empty")

        session.in_flight = True
        session.messages.append(ChatMessage(sender=Sender.USER, text=text))
        reply = ChatMessage(sender=Sender.ASSISTANT, text="", streaming=True)
        session.messages.append(reply)
        return ReplyStream(session, reply, self._stream(session, reply, text))

    async def _stream(self, session: ChatSession, reply: ChatMessage, text: str) -> AsyncIterator[str]:
        try:
            stream = await asyncio.wait_for(
                session._chat.send_message_stream(text), timeout=self.chunk_timeout
            )
            chunks = stream.__aiter__()
            while True:
                try:
                    chunk = await asyncio.wait_for(chunks.__anext__(), timeout=self.chunk_timeout)
                except StopAsyncIteration:
                    break
                delta = getattr(chunk, "text", None) or ""
                if not delta:
                    continue
                reply.text += delta
                yield delta
        except Exception as e:
            logger.warning("Chat stream failed for cohort %s: %s", session.cohort.value, e)
            reply.text = CHAT_ERROR_TEXT
        finally:
            _finalize(session, reply)


def _finalize(session: ChatSession, reply: ChatMessage) -> None:
    # Idempotent: a late second call must not release a newer send
    if reply.streaming:
        reply.streaming = False
        session.in_flight = False


class ReplyStream:
    """Async iterator over one reply's text deltas.

    ``aclose`` always finalizes the reply, including when iteration never
    started and the underlying generator's ``finally`` therefore never runs.
    """

    def __init__(self, session: ChatSession, reply: ChatMessage, deltas: AsyncIterator[str]):
        self.session = session
        self.reply = reply
        self._deltas = deltas

    def __aiter__(self) -> "ReplyStream":
        return self

    async def __anext__(self) -> str:
        return await self._deltas.__anext__()

    async def aclose(self) -> None:
        try:
            await self._deltas.aclose()
        finally:
            _finalize(self.session, self.reply)
