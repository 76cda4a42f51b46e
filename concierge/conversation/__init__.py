"""Conversation domain: state, turns, history.

The state machine itself lives in ``concierge.conversation.controller``.
"""

from concierge.conversation.history import History
from concierge.conversation.models import (
    ConversationState,
    PolicyResult,
    Turn,
    TurnRole,
)

__all__ = [
    "ConversationState",
    "History",
    "PolicyResult",
    "Turn",
    "TurnRole",
]
