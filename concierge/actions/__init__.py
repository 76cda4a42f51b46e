"""Domain actions and the bus that announces them."""

from concierge.actions.bus import ActionBus, Listener
from concierge.actions.models import (
    ActionTag,
    Notice,
    RequestCompleted,
    ResponseReady,
    StateChanged,
    Topic,
    TranscriptUpdated,
    new_reference_id,
)

__all__ = [
    "ActionBus",
    "ActionTag",
    "Listener",
    "Notice",
    "RequestCompleted",
    "ResponseReady",
    "StateChanged",
    "Topic",
    "TranscriptUpdated",
    "new_reference_id",
]
