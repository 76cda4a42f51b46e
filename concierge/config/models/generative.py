"""Generative dialogue backend configuration."""

import os

from pydantic import BaseModel, Field, SecretStr, model_validator


class GenerativeConfig(BaseModel):
    """Configuration for the remote text-generation endpoint.

    The API key comes from ``generative.api_key`` (TOML or
    ``CONCIERGE_GENERATIVE__API_KEY``); when that is absent or blank the
    variable named by ``api_key_env`` is used instead. A key that is still
    blank after that is treated as missing.
    """

    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="API base URL",
    )
    model: str = Field(default="gemini-2.0-flash", description="Model identifier")
    api_key: SecretStr | None = Field(
        default=None,
        description="API key (prefer CONCIERGE_GENERATIVE__API_KEY or GEMINI_API_KEY)",
    )
    api_key_env: str = Field(
        default="GEMINI_API_KEY",
        description="Fallback environment variable holding the API key",
    )
    timeout: float = Field(
        default=20.0,
        gt=0,
        description="Request timeout in seconds",
    )
    completion_marker: str = Field(
        default="[ACTION:CONFIRM_CARD]",
        min_length=1,
        description="Marker the model emits when the request is confirmed",
    )

    @model_validator(mode="after")
    def resolve_api_key(self) -> "GenerativeConfig":
        if self.api_key is not None and not self.api_key.get_secret_value().strip():
            self.api_key = None
        if self.api_key is None and self.api_key_env:
            fallback = os.environ.get(self.api_key_env, "").strip()
            if fallback:
                self.api_key = SecretStr(fallback)
        return self

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None
