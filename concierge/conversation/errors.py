"""Recoverable failure kinds surfaced by the conversation controller.

Nothing here is fatal: capture failures become notices and a return to
idle, policy failures become a spoken apology.
"""

from typing import Any

from concierge.policy.base import HttpStatusError, PolicyError, PolicyErrorKind


class NoticeKind:
    """Kinds of ``session.notice`` payloads."""

    CAPTURE_UNSUPPORTED = "capture_unsupported"
    CAPTURE_ERROR = "capture_error"
    POLICY_ERROR = "policy_error"
    POLICY_CRASHED = "policy_crashed"


APOLOGIES: dict[PolicyErrorKind, str] = {
    PolicyErrorKind.MISSING_CREDENTIAL: (
        "My systems are offline because the API key is missing."
    ),
    PolicyErrorKind.TRANSPORT_FAILURE: (
        "I am having trouble connecting to the residence server. Please try again."
    ),
    PolicyErrorKind.HTTP_ERROR: (
        "The residence server declined my request. Please try again in a moment."
    ),
    PolicyErrorKind.MALFORMED_RESPONSE: (
        "I received an answer I could not understand. Please say that again."
    ),
}

# Prefixes for the diagnostic line shown next to the apology
FAILURE_LABELS: dict[PolicyErrorKind, str] = {
    PolicyErrorKind.MISSING_CREDENTIAL: "System failure",
    PolicyErrorKind.TRANSPORT_FAILURE: "Network error",
    PolicyErrorKind.HTTP_ERROR: "Backend rejected the request",
    PolicyErrorKind.MALFORMED_RESPONSE: "Unreadable backend response",
}

CAPTURE_MESSAGES: dict[str, str] = {
    "unsupported": "Voice recognition is not available on this device.",
    "permission_denied": (
        "Microphone access was denied. Please allow microphone access and try again."
    ),
}
DEFAULT_CAPTURE_MESSAGE = "I could not hear you. Please try again."


def apology_for(kind: PolicyErrorKind) -> str:
    """Spoken apology for a policy failure kind."""
    return APOLOGIES[kind]


def capture_message(kind: str) -> str:
    """User-facing notice text for a capture failure kind."""
    return CAPTURE_MESSAGES.get(kind, DEFAULT_CAPTURE_MESSAGE)


def failure_details(error: PolicyError) -> dict[str, Any]:
    """Notice details describing what went wrong with the backend.

    ``detail`` is a one-line diagnostic such as
    ``"Backend rejected the request: API key not valid"``; HTTP failures
    also carry the status code and the backend's own message.
    """
    details: dict[str, Any] = {"error_kind": error.kind.value}
    if isinstance(error, HttpStatusError):
        details["status_code"] = error.status_code
        details["api_message"] = error.api_message
        reason = error.api_message
    else:
        reason = str(error) or type(error).__name__
    details["detail"] = f"{FAILURE_LABELS[error.kind]}: {reason}"
    return details
