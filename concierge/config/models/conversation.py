"""Conversation controller configuration."""

from typing import Literal

from pydantic import BaseModel, Field

PolicyType = Literal["rules", "generative"]


class ConversationConfig(BaseModel):
    """Turn-taking behaviour of the conversation controller."""

    policy: PolicyType = Field(
        default="rules",
        description="Dialogue policy backend selected at construction time",
    )
    auto_continue: bool = Field(
        default=True,
        description="Re-enter listening after the assistant finishes speaking",
    )
    voice_enabled: bool = Field(
        default=True,
        description="Speak responses; when disabled responses are text only",
    )
    processing_delay_ms: int = Field(
        default=0,
        ge=0,
        description="Minimum dwell in the processing state",
    )
