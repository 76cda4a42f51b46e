"""Dialogue policies.

Two interchangeable backends behind ``DialoguePolicy``:
- RuleBasedPolicy: ordered keyword rules, no I/O
- GenerativePolicy: one HTTP call to a text-generation endpoint per turn
"""

from concierge.policy.base import (
    DialoguePolicy,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialError,
    PolicyError,
    PolicyErrorKind,
    TransportFailureError,
)
from concierge.policy.factory import PolicyFactory, create_policy
from concierge.policy.generative import GenerativePolicy
from concierge.policy.rules import RuleBasedPolicy

__all__ = [
    "DialoguePolicy",
    "GenerativePolicy",
    "HttpStatusError",
    "MalformedResponseError",
    "MissingCredentialError",
    "PolicyError",
    "PolicyErrorKind",
    "PolicyFactory",
    "RuleBasedPolicy",
    "TransportFailureError",
    "create_policy",
]
