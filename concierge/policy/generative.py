"""Generative dialogue policy backed by a remote text-generation endpoint.

One POST per user turn, no retries. The model follows the same four-step
script as the keyword policy and signals a confirmed request with an exact
marker, which is stripped before the response is spoken.
"""

from collections.abc import Sequence
from typing import Any

import httpx

from concierge.actions.models import RequestCompleted
from concierge.config.models.assistant import AssistantConfig
from concierge.config.models.generative import GenerativeConfig
from concierge.conversation.models import PolicyResult, Turn
from concierge.observability.logging import get_logger
from concierge.policy.base import (
    DialoguePolicy,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialError,
    TransportFailureError,
)
from concierge.policy.prompt import build_preamble, compose_prompt

logger = get_logger(__name__)

CONFIRMATION_FALLBACK = "Request confirmed."


class GenerativePolicy(DialoguePolicy):
    """Dialogue policy using a generateContent-style HTTP API."""

    name = "generative"

    def __init__(
        self,
        config: GenerativeConfig | None = None,
        assistant: AssistantConfig | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the generative policy.

        Args:
            config: Endpoint, model, timeout and completion marker
            assistant: Persona used in the preamble and in emitted actions
            api_key: API key overriding the configured one
            client: HTTP client to use instead of creating one
        """
        self._config = config or GenerativeConfig()
        self._assistant = assistant or AssistantConfig()
        if api_key is None and self._config.api_key is not None:
            api_key = self._config.api_key.get_secret_value()
        self._api_key = api_key
        self._preamble = build_preamble(self._assistant, self._config.completion_marker)
        self._client = client or httpx.AsyncClient(timeout=self._config.timeout)

    @property
    def endpoint(self) -> str:
        base_url = self._config.base_url.rstrip("/")
        return f"{base_url}/models/{self._config.model}:generateContent"

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    async def decide(self, utterance: str, history: Sequence[Turn]) -> PolicyResult:
        """Ask the backend for the next response.

        Raises:
            MissingCredentialError: No API key; the backend is not called
            TransportFailureError: Network failure or timeout
            HttpStatusError: Non-success status from the backend
            MalformedResponseError: Body lacks the candidate text
        """
        if not self.has_credential:
            raise MissingCredentialError("API key is missing or empty")

        prompt = compose_prompt(self._preamble, history, utterance, self._assistant.name)
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        logger.debug(
            "policy_request",
            model=self._config.model,
            history_turns=len(history),
            prompt_chars=len(prompt),
        )

        try:
            response = await self._client.post(
                self.endpoint,
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.TransportError as e:
            logger.warning(
                "policy_transport_failed",
                model=self._config.model,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise TransportFailureError(str(e) or type(e).__name__) from e

        if not 200 <= response.status_code < 300:
            message = self._error_message(response)
            logger.error(
                "policy_http_error",
                model=self._config.model,
                status_code=response.status_code,
                error=message,
            )
            raise HttpStatusError(response.status_code, message)

        text = self._candidate_text(response)
        return self._parse(text)

    async def close(self) -> None:
        await self._client.aclose()

    def _parse(self, text: str) -> PolicyResult:
        marker = self._config.completion_marker
        action = None
        if marker in text:
            text = text.replace(marker, "")
            action = RequestCompleted(service=self._assistant.service, fee=self._assistant.fee)

        text = text.strip()
        if not text:
            if action is None:
                raise MalformedResponseError("Candidate text is empty")
            # Marker alone still confirms the request
            text = CONFIRMATION_FALLBACK

        logger.debug(
            "policy_response",
            model=self._config.model,
            response_chars=len(text),
            completed=action is not None,
        )
        return PolicyResult(response_text=text, action=action)

    @staticmethod
    def _candidate_text(response: httpx.Response) -> str:
        try:
            data: Any = response.json()
        except ValueError as e:
            raise MalformedResponseError("Response body is not JSON") from e

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("Response has no candidate text") from e

        if not isinstance(text, str):
            raise MalformedResponseError("Candidate text is not a string")
        return text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"HTTP {response.status_code}"
