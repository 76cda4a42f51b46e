"""Concierge: voice-driven residence assistant turn manager.

Coordinates speech capture, a dialogue policy and speech playback one turn
at a time, and announces completed service requests to observers.
"""

from concierge.actions.bus import ActionBus
from concierge.actions.models import RequestCompleted, Topic
from concierge.conversation.controller import ConversationController
from concierge.conversation.models import ConversationState, PolicyResult, Turn, TurnRole
from concierge.policy import GenerativePolicy, RuleBasedPolicy, create_policy

__version__ = "0.1.0"

__all__ = [
    "ActionBus",
    "ConversationController",
    "ConversationState",
    "GenerativePolicy",
    "PolicyResult",
    "RequestCompleted",
    "RuleBasedPolicy",
    "Topic",
    "Turn",
    "TurnRole",
    "create_policy",
]
