"""Configuration model exports.

    from concierge.config.models import AssistantConfig, GenerativeConfig
"""

from concierge.config.models.assistant import AssistantConfig
from concierge.config.models.conversation import ConversationConfig, PolicyType
from concierge.config.models.generative import GenerativeConfig
from concierge.config.models.observability import LoggingConfig, ObservabilityConfig

__all__ = [
    "AssistantConfig",
    "ConversationConfig",
    "GenerativeConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "PolicyType",
]
