"""Event contracts of the speech adapters.

Input, per activation: STARTED, zero or more PARTIAL, then exactly one of
FINAL, ERROR or ABORTED. Output, per ``speak()``: STARTED, then exactly one
of ENDED or ERROR, or nothing at all if ``cancel()`` preempts it.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SpeechInputEventType(str, Enum):
    STARTED = "started"
    PARTIAL = "partial"
    FINAL = "final"
    ERROR = "error"
    ABORTED = "aborted"


class CaptureErrorKind(str, Enum):
    """Why speech capture failed."""

    UNSUPPORTED = "unsupported"
    PERMISSION_DENIED = "permission_denied"
    NO_SPEECH = "no_speech"
    NETWORK = "network"
    OTHER = "other"


INPUT_TERMINAL_EVENTS = frozenset({
    SpeechInputEventType.FINAL,
    SpeechInputEventType.ERROR,
    SpeechInputEventType.ABORTED,
})


class SpeechInputEvent(BaseModel):
    """Event emitted by a speech input adapter for one activation."""

    model_config = ConfigDict(frozen=True)

    type: SpeechInputEventType
    activation_id: UUID
    text: str = Field(default="", description="Transcript for PARTIAL and FINAL")
    error: CaptureErrorKind | None = Field(default=None, description="Set for ERROR")
    message: str | None = Field(default=None, description="Engine-provided detail")

    @property
    def is_terminal(self) -> bool:
        return self.type in INPUT_TERMINAL_EVENTS


class SpeechOutputEventType(str, Enum):
    STARTED = "started"
    ENDED = "ended"
    ERROR = "error"


class SpeechOutputEvent(BaseModel):
    """Event emitted by a speech output adapter for one utterance."""

    model_config = ConfigDict(frozen=True)

    type: SpeechOutputEventType
    utterance_id: UUID
    message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.type is not SpeechOutputEventType.STARTED
