"""Factory selecting the dialogue policy from configuration.

The controller only sees the ``DialoguePolicy`` interface; which backend
runs is decided once, here, at construction time.
"""

from collections.abc import Callable

from concierge.config.settings import Settings
from concierge.observability.logging import get_logger
from concierge.policy.base import DialoguePolicy
from concierge.policy.generative import GenerativePolicy
from concierge.policy.rules import RuleBasedPolicy

PolicyBuilder = Callable[[Settings], DialoguePolicy]

logger = get_logger(__name__)


def _build_generative(settings: Settings) -> DialoguePolicy:
    if not settings.generative.has_api_key:
        # Still built: every turn answers with the missing-key apology
        logger.warning("generative_key_missing", key_env=settings.generative.api_key_env)
    return GenerativePolicy(config=settings.generative, assistant=settings.assistant)


class PolicyFactory:
    """Creates policies by type name.

    Supports:
    - "rules": deterministic keyword policy (default)
    - "generative": remote text-generation backend
    - custom policies via register()
    """

    def __init__(self) -> None:
        self._builders: dict[str, PolicyBuilder] = {
            "rules": lambda s: RuleBasedPolicy(assistant=s.assistant),
            "generative": _build_generative,
        }

    def create(self, policy_type: str, settings: Settings) -> DialoguePolicy:
        """Create a policy.

        Raises:
            ValueError: If policy_type is not registered
        """
        builder = self._builders.get(policy_type)
        if builder is None:
            raise ValueError(
                f"Unknown policy type: {policy_type}. "
                f"Available: {self.available_types}"
            )
        return builder(settings)

    def register(self, policy_type: str, builder: PolicyBuilder) -> None:
        """Register a custom policy builder."""
        self._builders[policy_type] = builder

    @property
    def available_types(self) -> list[str]:
        return list(self._builders.keys())


def create_policy(settings: Settings, policy_type: str | None = None) -> DialoguePolicy:
    """Create the policy named by ``policy_type`` or ``settings.conversation.policy``."""
    return PolicyFactory().create(policy_type or settings.conversation.policy, settings)
