"""Root settings model for Concierge configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from concierge.config.loader import load_config
from concierge.config.models.assistant import AssistantConfig
from concierge.config.models.conversation import ConversationConfig
from concierge.config.models.generative import GenerativeConfig
from concierge.config.models.observability import ObservabilityConfig


class TomlLayersSource(PydanticBaseSettingsSource):
    """Settings source reading the merged TOML layers once per load."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._data = load_config()

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {
            name: self._data[name]
            for name in self.settings_cls.model_fields
            if name in self._data
        }


class Settings(BaseSettings):
    """Everything a concierge session is configured by.

    Precedence, highest first: constructor arguments, ``CONCIERGE_*``
    environment variables (``__`` separates nested keys), the TOML layers,
    then model defaults. The generative API key additionally falls back to
    ``GEMINI_API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONCIERGE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="concierge", description="Application name for logging")
    debug: bool = Field(default=False, description="Log at DEBUG regardless of the level set")

    assistant: AssistantConfig = Field(
        default_factory=AssistantConfig,
        description="Assistant persona",
    )
    conversation: ConversationConfig = Field(
        default_factory=ConversationConfig,
        description="Conversation controller behaviour",
    )
    generative: GenerativeConfig = Field(
        default_factory=GenerativeConfig,
        description="Generative dialogue backend",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlLayersSource(settings_cls),
        )
