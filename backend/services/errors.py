"""Error taxonomy for the coaching core.

TransportError and SchemaViolation never escape the advisory gateway; they are
folded into a ``Failure`` there. The rest surface to callers and are mapped to
HTTP status codes in ``main.py``.
"""


class CoachError(Exception):
    """Base class for all domain errors."""


class TransportError(CoachError):
    """Gemini unreachable, timed out, or returned a service error."""


class SchemaViolation(CoachError):
    """Response shape does not match the declared contract."""


class EmptyResult(CoachError):
    """Structurally valid but semantically empty response (e.g. zero questions)."""


class UserInputError(CoachError):
    """Client-side validation failure. Raised before any request is issued."""


class QuizStateError(CoachError):
    """Operation not allowed in the quiz runner's current state."""


class SendInProgressError(CoachError):
    """A chat reply is still streaming for this session."""


class SessionClosedError(CoachError):
    """The chat session was torn down by a cohort change."""


class ProfileNotSelectedError(CoachError):
    """No cohort profile has been selected yet."""
