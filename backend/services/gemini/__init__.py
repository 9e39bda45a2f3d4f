"""Gemini access: the advisory gateway and its prompt builders."""

from services.gemini.service import AdvisoryGateway
from services.gemini.helpers import make_client, json_config, chat_config
from services.gemini.prompts import build_prompt, PROMPT_BUILDERS

__all__ = [
    "AdvisoryGateway",
    "make_client",
    "json_config",
    "chat_config",
    "build_prompt",
    "PROMPT_BUILDERS",
]
