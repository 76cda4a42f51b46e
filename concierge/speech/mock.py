"""Scripted speech adapters for testing.

They synthesize the event sequences of real capture and synthesis engines
on command, without touching audio hardware. Useful for unit tests and
for driving the controller deterministically.
"""

from typing import Any
from uuid import UUID

from concierge.speech.base import SpeechInputAdapter, SpeechOutputAdapter
from concierge.speech.events import (
    CaptureErrorKind,
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)


class MockSpeechInput(SpeechInputAdapter):
    """Capture adapter driven by test code.

    ``start()`` emits STARTED (or an UNSUPPORTED error when constructed with
    ``supported=False``); the test then calls :meth:`partial`,
    :meth:`finish`, :meth:`fail` or :meth:`abort` to play the engine's part.
    """

    def __init__(self, supported: bool = True) -> None:
        super().__init__()
        self._supported = supported
        self._activation_id: UUID | None = None
        self._last_partial = ""
        self._call_history: list[dict[str, Any]] = []
        self.events: list[SpeechInputEvent] = []

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of commands for testing assertions."""
        return self._call_history

    @property
    def is_active(self) -> bool:
        return self._activation_id is not None

    @property
    def activation_id(self) -> UUID | None:
        return self._activation_id

    @property
    def start_count(self) -> int:
        return sum(1 for c in self._call_history if c["command"] == "start")

    async def start(self, activation_id: UUID) -> None:
        self._call_history.append({"command": "start", "activation_id": activation_id})
        if not self._supported:
            await self._emit(
                SpeechInputEventType.ERROR,
                activation_id,
                error=CaptureErrorKind.UNSUPPORTED,
            )
            return
        self._activation_id = activation_id
        self._last_partial = ""
        await self._emit(SpeechInputEventType.STARTED, activation_id)

    async def stop(self) -> None:
        self._call_history.append({"command": "stop"})
        if self._activation_id is None:
            return
        activation_id = self._end_activation()
        await self._emit(SpeechInputEventType.ABORTED, activation_id)

    async def partial(self, text: str) -> None:
        """Report an interim transcript."""
        activation_id = self._require_active()
        self._last_partial = text
        await self._emit(SpeechInputEventType.PARTIAL, activation_id, text=text)

    async def finish(self, text: str | None = None) -> None:
        """End the activation with a final transcript.

        Without ``text`` the last partial transcript becomes final, the way
        engines report whatever they heard when speech ends.
        """
        self._require_active()
        final_text = self._last_partial if text is None else text
        activation_id = self._end_activation()
        await self._emit(SpeechInputEventType.FINAL, activation_id, text=final_text)

    async def fail(
        self,
        kind: CaptureErrorKind = CaptureErrorKind.OTHER,
        message: str | None = None,
    ) -> None:
        """End the activation with a capture error."""
        self._require_active()
        activation_id = self._end_activation()
        await self._emit(
            SpeechInputEventType.ERROR, activation_id, error=kind, message=message
        )

    async def abort(self) -> None:
        """End the activation without a transcript."""
        self._require_active()
        activation_id = self._end_activation()
        await self._emit(SpeechInputEventType.ABORTED, activation_id)

    def _require_active(self) -> UUID:
        if self._activation_id is None:
            raise RuntimeError("No active capture")
        return self._activation_id

    def _end_activation(self) -> UUID:
        activation_id = self._require_active()
        self._activation_id = None
        return activation_id

    async def _emit(
        self,
        event_type: SpeechInputEventType,
        activation_id: UUID,
        **fields: Any,
    ) -> None:
        event = SpeechInputEvent(type=event_type, activation_id=activation_id, **fields)
        self.events.append(event)
        await self.emit(event)


class MockSpeechOutput(SpeechOutputAdapter):
    """Synthesis adapter driven by test code.

    ``speak()`` records the text and emits STARTED; the test ends the
    utterance with :meth:`complete` or :meth:`fail`.
    """

    def __init__(self) -> None:
        super().__init__()
        self._utterance_id: UUID | None = None
        self.spoken: list[str] = []
        self.cancel_count = 0
        self.events: list[SpeechOutputEvent] = []

    @property
    def is_speaking(self) -> bool:
        return self._utterance_id is not None

    @property
    def utterance_id(self) -> UUID | None:
        return self._utterance_id

    @property
    def last_spoken(self) -> str | None:
        return self.spoken[-1] if self.spoken else None

    async def speak(self, text: str, utterance_id: UUID) -> None:
        self._utterance_id = utterance_id
        self.spoken.append(text)
        await self._emit(SpeechOutputEventType.STARTED, utterance_id)

    async def cancel(self) -> None:
        self.cancel_count += 1
        self._utterance_id = None

    async def complete(self) -> None:
        """Finish the current utterance normally."""
        utterance_id = self._end_utterance()
        await self._emit(SpeechOutputEventType.ENDED, utterance_id)

    async def fail(self, message: str = "synthesis-failed") -> None:
        """Finish the current utterance with a synthesis error."""
        utterance_id = self._end_utterance()
        await self._emit(SpeechOutputEventType.ERROR, utterance_id, message=message)

    def _end_utterance(self) -> UUID:
        if self._utterance_id is None:
            raise RuntimeError("Nothing is being spoken")
        utterance_id = self._utterance_id
        self._utterance_id = None
        return utterance_id

    async def _emit(
        self,
        event_type: SpeechOutputEventType,
        utterance_id: UUID,
        message: str | None = None,
    ) -> None:
        event = SpeechOutputEvent(type=event_type, utterance_id=utterance_id, message=message)
        self.events.append(event)
        await self.emit(event)
