"""Shared test configuration."""
import json
import sys
import os
from unittest.mock import MagicMock

import pytest

# Add backend directory to path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# A key must be present for Settings to load; no test reaches the network
os.environ["GEMINI_API_KEY"] = "test-key"


def gemini_response(payload) -> MagicMock:
    """A generate_content response whose text is ``payload`` (JSON-encoded unless str)."""
    resp = MagicMock()
    resp.text = payload if isinstance(payload, str) else json.dumps(payload)
    return resp


class FakeChunk:
    def __init__(self, text):
        self.text = text


class FakeChat:
    """Stands in for a google-genai async chat.

    ``replies`` is consumed one send at a time; each reply is a list of text
    chunks, or an exception to raise partway after the listed chunks.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.sent: list[str] = []

    async def send_message_stream(self, message):
        self.sent.append(message)
        reply = self.replies.pop(0) if self.replies else ["ok"]
        return self._iterate(reply)

    async def _iterate(self, reply):
        for part in reply:
            if isinstance(part, Exception):
                raise part
            yield FakeChunk(part)


def make_fake_client(responses=None, chat_replies=None) -> MagicMock:
    """Gemini client double.

    ``responses`` feed ``models.generate_content`` in order (payloads or
    exceptions); every chat created by ``aio.chats.create`` shares
    ``chat_replies``.
    """
    client = MagicMock()
    if responses is not None:
        client.models.generate_content.side_effect = [
            r if isinstance(r, Exception) else gemini_response(r) for r in responses
        ]
    client.chats_created = []

    def create_chat(model, config):
        chat = FakeChat(chat_replies)
        client.chats_created.append((model, config, chat))
        return chat

    client.aio.chats.create.side_effect = create_chat
    return client


@pytest.fixture
def settings():
    from config import get_settings
    return get_settings()


@pytest.fixture
def fake_client():
    return make_fake_client()
