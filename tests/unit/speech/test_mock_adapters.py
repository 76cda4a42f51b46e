"""Tests for the scripted speech adapters and their event contracts."""

from uuid import uuid4

import pytest

from concierge.speech.events import (
    CaptureErrorKind,
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)
from concierge.speech.mock import MockSpeechInput, MockSpeechOutput


class EventSink:
    def __init__(self) -> None:
        self.events: list[SpeechInputEvent | SpeechOutputEvent] = []

    async def __call__(self, event: SpeechInputEvent | SpeechOutputEvent) -> None:
        self.events.append(event)


class TestMockSpeechInput:
    """Per activation: STARTED, PARTIAL*, then one terminal event."""

    @pytest.mark.asyncio
    async def test_activation_sequence(self) -> None:
        adapter = MockSpeechInput()
        sink = EventSink()
        adapter.set_listener(sink)
        activation_id = uuid4()

        await adapter.start(activation_id)
        await adapter.partial("I lost")
        await adapter.partial("I lost my card")
        await adapter.finish()

        assert [e.type for e in sink.events] == [
            SpeechInputEventType.STARTED,
            SpeechInputEventType.PARTIAL,
            SpeechInputEventType.PARTIAL,
            SpeechInputEventType.FINAL,
        ]
        assert all(e.activation_id == activation_id for e in sink.events)
        assert sink.events[-1].text == "I lost my card"
        assert sink.events[-1].is_terminal
        assert adapter.is_active is False

    @pytest.mark.asyncio
    async def test_stop_when_stopped_emits_nothing(self) -> None:
        """stop() is idempotent."""
        adapter = MockSpeechInput()
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.start(uuid4())
        await adapter.stop()
        await adapter.stop()

        assert [e.type for e in sink.events] == [
            SpeechInputEventType.STARTED,
            SpeechInputEventType.ABORTED,
        ]

    @pytest.mark.asyncio
    async def test_unsupported_platform(self) -> None:
        adapter = MockSpeechInput(supported=False)
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.start(uuid4())

        assert adapter.supported is False
        assert len(sink.events) == 1
        assert sink.events[0].type is SpeechInputEventType.ERROR
        assert sink.events[0].error is CaptureErrorKind.UNSUPPORTED

    @pytest.mark.asyncio
    async def test_fail_reports_kind(self) -> None:
        adapter = MockSpeechInput()
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.start(uuid4())
        await adapter.fail(CaptureErrorKind.PERMISSION_DENIED, "not-allowed")

        assert sink.events[-1].error is CaptureErrorKind.PERMISSION_DENIED
        assert sink.events[-1].message == "not-allowed"

    @pytest.mark.asyncio
    async def test_scripting_without_activation_raises(self) -> None:
        with pytest.raises(RuntimeError):
            await MockSpeechInput().finish("hello")


class TestMockSpeechOutput:
    """Per speak(): STARTED then ENDED or ERROR, or nothing after cancel()."""

    @pytest.mark.asyncio
    async def test_speak_then_complete(self) -> None:
        adapter = MockSpeechOutput()
        sink = EventSink()
        adapter.set_listener(sink)
        utterance_id = uuid4()

        await adapter.speak("Hello", utterance_id)
        await adapter.complete()

        assert [e.type for e in sink.events] == [
            SpeechOutputEventType.STARTED,
            SpeechOutputEventType.ENDED,
        ]
        assert adapter.spoken == ["Hello"]
        assert adapter.is_speaking is False

    @pytest.mark.asyncio
    async def test_cancel_preempts_terminal_event(self) -> None:
        adapter = MockSpeechOutput()
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.speak("Hello", uuid4())
        await adapter.cancel()
        await adapter.cancel()

        assert [e.type for e in sink.events] == [SpeechOutputEventType.STARTED]
        assert adapter.is_speaking is False
        with pytest.raises(RuntimeError):
            await adapter.complete()

    @pytest.mark.asyncio
    async def test_cancel_when_silent_is_safe(self) -> None:
        adapter = MockSpeechOutput()
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.cancel()

        assert sink.events == []
        assert adapter.cancel_count == 1

    @pytest.mark.asyncio
    async def test_fail(self) -> None:
        adapter = MockSpeechOutput()
        sink = EventSink()
        adapter.set_listener(sink)

        await adapter.speak("Hello", uuid4())
        await adapter.fail("audio-busy")

        assert sink.events[-1].type is SpeechOutputEventType.ERROR
        assert sink.events[-1].message == "audio-busy"
