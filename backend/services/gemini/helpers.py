"""Module-level helpers shared by the advisory gateway and the chat sessions."""

import logging

from google import genai
from google.genai import types as genai_types
from pydantic import BaseModel

from config import Settings

logger = logging.getLogger("coincoach.gemini")


def make_client(settings: Settings) -> genai.Client:
    """One Gemini client per process; chat sessions and advisory calls share it."""
    return genai.Client(api_key=settings.gemini_api_key)


def json_config(response_schema: type[BaseModel]) -> genai_types.GenerateContentConfig:
    """Constrain Gemini to emit JSON shaped like ``response_schema``."""
    return genai_types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=response_schema,
    )


def chat_config(system_instruction: str) -> genai_types.GenerateContentConfig:
    return genai_types.GenerateContentConfig(system_instruction=system_instruction)
