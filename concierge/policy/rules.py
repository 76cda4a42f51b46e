"""Deterministic keyword policy.

Rules are checked in order and the first match wins. They overlap on
purpose ("yes, I lost my card yesterday" matches rule 1 before rule 3), so
the order is the tie-break and must not change.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from concierge.actions.models import RequestCompleted
from concierge.config.models.assistant import AssistantConfig
from concierge.conversation.models import PolicyResult, Turn
from concierge.policy.base import DialoguePolicy

TIME_WORDS = ("yesterday", "day", "ago", "last week")
CONFIRM_WORDS = ("yes", "sure", "go ahead", "please")


@dataclass(frozen=True)
class KeywordRule:
    """A predicate over the lowercased utterance and the outcome it selects."""

    name: str
    matches: Callable[[str], bool]
    respond: Callable[[], PolicyResult]


def _contains_any(words: Sequence[str]) -> Callable[[str], bool]:
    return lambda text: any(word in text for word in words)


class RuleBasedPolicy(DialoguePolicy):
    """Scripted lost-card conversation: ask date, quote fee, confirm."""

    name = "rules"

    def __init__(self, assistant: AssistantConfig | None = None) -> None:
        self._assistant = assistant or AssistantConfig()
        self._rules: tuple[KeywordRule, ...] = (
            KeywordRule(
                name="lost_card",
                matches=lambda text: "lost" in text and "card" in text,
                respond=self._ask_loss_date,
            ),
            KeywordRule(
                name="loss_date",
                matches=_contains_any(TIME_WORDS),
                respond=self._quote_fee,
            ),
            KeywordRule(
                name="confirm",
                matches=_contains_any(CONFIRM_WORDS),
                respond=self._confirm,
            ),
        )

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def classify(self, utterance: str) -> str | None:
        """Name of the first rule matching ``utterance``, or None for the fallback."""
        rule = self._match(utterance)
        return rule.name if rule else None

    async def decide(self, utterance: str, history: Sequence[Turn]) -> PolicyResult:  # noqa: ARG002
        rule = self._match(utterance)
        return rule.respond() if rule else self._clarify()

    def _match(self, utterance: str) -> KeywordRule | None:
        text = utterance.lower()
        return next((rule for rule in self._rules if rule.matches(text)), None)

    def _ask_loss_date(self) -> PolicyResult:
        return PolicyResult(
            response_text=(
                "I'm sorry to hear that. Please tell me, when did you lose your card?"
            )
        )

    def _quote_fee(self) -> PolicyResult:
        return PolicyResult(
            response_text=(
                f"Understood. A replacement fee of {self._assistant.fee} will be added "
                "to your bill. Shall I proceed?"
            )
        )

    def _confirm(self) -> PolicyResult:
        return PolicyResult(
            response_text=(
                "Request confirmed. Your new access card will be ready at the "
                "concierge desk."
            ),
            action=RequestCompleted(
                service=self._assistant.service,
                fee=self._assistant.fee,
            ),
        )

    def _clarify(self) -> PolicyResult:
        return PolicyResult(
            response_text=(
                "I can help you replace a lost access card. Could you tell me a "
                "little more?"
            )
        )
