"""Prompt composition for the generative policy."""

from collections.abc import Sequence

from concierge.config.models.assistant import AssistantConfig
from concierge.conversation.models import Turn, TurnRole

PROTOCOL = """
You are {assistant}, a high-end Residence Assistant for {organization}.
Your tone is professional, warm, and concise.

User Name: {resident}
Current Fee for Lost Card: {fee}

PROTOCOL:
1. If user says they lost a card, express sympathy and ask WHEN they lost it.
2. If they give a time (any time, like "yesterday", "2 days ago", "last week"), tell them the replacement cost ({fee}) will be added to their bill and ask to proceed.
3. If they confirm (yes/sure/go ahead), say "Request confirmed" and output the exact secret tag: {marker}.
4. Keep responses short (under 2 sentences) so they are easy to speak.
""".strip()


def build_preamble(assistant: AssistantConfig, marker: str) -> str:
    """Persona and four-step protocol shared by every request."""
    return PROTOCOL.format(
        assistant=assistant.name,
        organization=assistant.organization,
        resident=assistant.resident_name,
        fee=assistant.fee,
        marker=marker,
    )


def serialize_history(history: Sequence[Turn], assistant_name: str) -> str:
    """Render turns as ``Speaker: text`` lines, oldest first."""
    speakers = {TurnRole.USER: "User", TurnRole.ASSISTANT: assistant_name}
    return "\n".join(f"{speakers[turn.role]}: {turn.text}" for turn in history)


def compose_prompt(
    preamble: str,
    history: Sequence[Turn],
    utterance: str,
    assistant_name: str,
) -> str:
    """Single prompt string sent to the generative backend."""
    return (
        f"{preamble}\n\n"
        f"CONVERSATION HISTORY:\n{serialize_history(history, assistant_name)}\n"
        f"User: {utterance}\n"
        f"{assistant_name}:"
    )
