from enum import Enum

from pydantic import BaseModel


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One transcript entry. ``streaming`` is true only while a reply is arriving."""
    sender: Sender
    text: str
    streaming: bool = False


class ChatSend(BaseModel):
    message: str


class Transcript(BaseModel):
    cohort: str
    messages: list[ChatMessage]
    in_flight: bool
