"""Speech adapter interfaces.

Adapters wrap a platform capture or synthesis engine. They receive commands
from the conversation controller and report back through a single async
listener; they own no conversation state.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from uuid import UUID

from concierge.speech.events import SpeechInputEvent, SpeechOutputEvent

InputListener = Callable[[SpeechInputEvent], Awaitable[None]]
OutputListener = Callable[[SpeechOutputEvent], Awaitable[None]]


class SpeechInputAdapter(ABC):
    """Wraps a speech capture engine."""

    def __init__(self) -> None:
        self._listener: InputListener | None = None

    def set_listener(self, listener: InputListener | None) -> None:
        """Route this adapter's events to ``listener``."""
        self._listener = listener

    async def emit(self, event: SpeechInputEvent) -> None:
        if self._listener is not None:
            await self._listener(event)

    @property
    def supported(self) -> bool:
        """Whether the platform can capture speech at all."""
        return True

    @abstractmethod
    async def start(self, activation_id: UUID) -> None:
        """Begin capturing; events for this activation carry ``activation_id``."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop capturing. A no-op without events when already stopped."""


class SpeechOutputAdapter(ABC):
    """Wraps a speech synthesis engine."""

    def __init__(self) -> None:
        self._listener: OutputListener | None = None

    def set_listener(self, listener: OutputListener | None) -> None:
        """Route this adapter's events to ``listener``."""
        self._listener = listener

    async def emit(self, event: SpeechOutputEvent) -> None:
        if self._listener is not None:
            await self._listener(event)

    @abstractmethod
    async def speak(self, text: str, utterance_id: UUID) -> None:
        """Start speaking ``text``; completion is reported as an event."""

    @abstractmethod
    async def cancel(self) -> None:
        """Silence any current utterance. Idempotent and safe when silent."""
