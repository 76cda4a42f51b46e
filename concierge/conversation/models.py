"""Conversation domain models.

- ConversationState: the controller's single active mode
- Turn: one utterance recorded in the session history
- PolicyResult: what a dialogue policy decided for an utterance
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from concierge.actions.models import RequestCompleted


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ConversationState(str, Enum):
    """Mode of the conversation controller. Exactly one holds at a time."""

    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"
    SPEAKING = "speaking"
    ERROR = "error"


class TurnRole(str, Enum):
    """Speaker of a recorded turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """A single utterance in the session history."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole = Field(..., description="Who spoke")
    text: str = Field(..., description="What was said")
    timestamp: datetime = Field(default_factory=utc_now, description="When it was recorded")


class PolicyResult(BaseModel):
    """Response chosen by a dialogue policy plus an optional domain action."""

    model_config = ConfigDict(frozen=True)

    response_text: str = Field(..., description="Text to speak or render")
    action: RequestCompleted | None = Field(
        default=None, description="Domain action to announce, if any"
    )
