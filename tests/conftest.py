"""Shared test fixtures for the Concierge test suite."""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from concierge.actions.bus import ActionBus
from concierge.config.models.assistant import AssistantConfig
from concierge.conversation.controller import ConversationController
from concierge.policy.rules import RuleBasedPolicy
from concierge.speech.mock import MockSpeechInput, MockSpeechOutput


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Load settings from an empty config dir with no key or env overrides.

    Tests that need TOML point CONCIERGE_CONFIG_DIR at ``test_config_dir``.
    """
    from concierge.config import get_settings

    empty_dir = tmp_path / "no-config"
    empty_dir.mkdir()
    monkeypatch.setenv("CONCIERGE_CONFIG_DIR", str(empty_dir))
    for name in (
        "CONCIERGE_ENV",
        "CONCIERGE_DEBUG",
        "CONCIERGE_CONVERSATION__POLICY",
        "CONCIERGE_GENERATIVE__API_KEY",
        "GEMINI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class BusRecorder:
    """Bus subscriber that keeps everything it receives."""

    def __init__(self) -> None:
        self.received: list[tuple[str, Any]] = []

    def __call__(self, topic: str, payload: Any) -> None:
        self.received.append((topic, payload))

    def payloads(self, topic: str) -> list[Any]:
        return [payload for t, payload in self.received if t == topic]

    def states(self) -> list[str]:
        return [payload.current for t, payload in self.received if t == "session.state"]


@pytest.fixture
def assistant_config() -> AssistantConfig:
    return AssistantConfig()


@pytest.fixture
def speech_input() -> MockSpeechInput:
    return MockSpeechInput()


@pytest.fixture
def speech_output() -> MockSpeechOutput:
    return MockSpeechOutput()


@pytest.fixture
def bus() -> ActionBus:
    return ActionBus()


@pytest.fixture
def recorder(bus: ActionBus) -> BusRecorder:
    """Records every bus publication."""
    recorder = BusRecorder()
    bus.subscribe("*", recorder)
    return recorder


@pytest.fixture
def controller(
    speech_input: MockSpeechInput,
    speech_output: MockSpeechOutput,
    bus: ActionBus,
    assistant_config: AssistantConfig,
) -> ConversationController:
    """Controller over the keyword policy and scripted adapters."""
    return ConversationController(
        policy=RuleBasedPolicy(assistant=assistant_config),
        speech_input=speech_input,
        speech_output=speech_output,
        bus=bus,
    )
