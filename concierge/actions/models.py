"""Action and bus event models.

Actions are domain events (a completed service request) announced to
observers such as the rendering layer. Session events describe the
controller's progress so a UI can follow along without touching its state.
"""

from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

REFERENCE_PREFIX = "EMR"


class Topic:
    """Topics published on the action bus."""

    REQUEST_COMPLETED = "action.request_completed"
    STATE = "session.state"
    TRANSCRIPT = "session.transcript"
    RESPONSE = "session.response"
    NOTICE = "session.notice"


class ActionTag(str, Enum):
    """Closed set of domain actions."""

    REQUEST_COMPLETED = "request_completed"


def new_reference_id() -> str:
    """Mint an opaque, unique reference token for a completed request."""
    return f"{REFERENCE_PREFIX}-{uuid4().hex[:10].upper()}"


class RequestCompleted(BaseModel):
    """A service request the resident confirmed.

    The reference id is minted when the action is created, which is the
    moment a policy emits it.
    """

    model_config = ConfigDict(frozen=True)

    tag: Literal[ActionTag.REQUEST_COMPLETED] = ActionTag.REQUEST_COMPLETED
    service: str = Field(..., description="Service that was requested")
    fee: str = Field(..., description="Fee added to the resident's bill")
    reference_id: str = Field(
        default_factory=new_reference_id, min_length=1, description="Correlation token"
    )

    @property
    def topic(self) -> str:
        return Topic.REQUEST_COMPLETED


class StateChanged(BaseModel):
    """The controller moved between states."""

    model_config = ConfigDict(frozen=True)

    previous: str
    current: str


class TranscriptUpdated(BaseModel):
    """Partial transcript while the resident is speaking."""

    model_config = ConfigDict(frozen=True)

    text: str
    final: bool = False


class ResponseReady(BaseModel):
    """Assistant response text, spoken or rendered as text only."""

    model_config = ConfigDict(frozen=True)

    text: str
    spoken: bool


class Notice(BaseModel):
    """Transient, user-facing notice about a recoverable failure."""

    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
