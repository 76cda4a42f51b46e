"""Dialogue policy interface and error types.

A policy maps the latest utterance plus the conversation history to a
response and an optional domain action. Policies own no session state:
the conversation controller is the only owner of history.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from concierge.conversation.models import PolicyResult, Turn


class DialoguePolicy(ABC):
    """Decides what the assistant says next."""

    name: str = "policy"

    @abstractmethod
    async def decide(self, utterance: str, history: Sequence[Turn]) -> PolicyResult:
        """Choose a response for ``utterance``.

        Args:
            utterance: Final transcript of the resident's latest turn
            history: Completed turns of the session, oldest first

        Returns:
            PolicyResult with the response text and optional action

        Raises:
            PolicyError: If the policy could not produce a response
        """

    async def close(self) -> None:
        """Release resources held by the policy."""


# ============================================================================
# Error Types
# ============================================================================


class PolicyErrorKind(str, Enum):
    """Distinct ways a policy can fail to produce a response."""

    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_FAILURE = "transport_failure"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"


class PolicyError(Exception):
    """Base exception for dialogue policy failures."""

    kind: PolicyErrorKind = PolicyErrorKind.TRANSPORT_FAILURE


class MissingCredentialError(PolicyError):
    """API key absent or blank; the backend was not called."""

    kind = PolicyErrorKind.MISSING_CREDENTIAL


class TransportFailureError(PolicyError):
    """Network failure or timeout before a response arrived."""

    kind = PolicyErrorKind.TRANSPORT_FAILURE


class HttpStatusError(PolicyError):
    """Backend answered with a non-success status."""

    kind = PolicyErrorKind.HTTP_ERROR

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.api_message = message


class MalformedResponseError(PolicyError):
    """Response body lacked the expected candidate text."""

    kind = PolicyErrorKind.MALFORMED_RESPONSE
