"""Tests for the text-console speech adapters."""

from io import StringIO
from uuid import uuid4

import pytest

from concierge.speech.console import ConsoleSpeechInput, ConsoleSpeechOutput
from concierge.speech.events import (
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)


class TestConsoleSpeechInput:
    @pytest.mark.asyncio
    async def test_submit_delivers_final_transcript(self) -> None:
        adapter = ConsoleSpeechInput()
        events: list[SpeechInputEvent] = []

        async def listener(event: SpeechInputEvent) -> None:
            events.append(event)

        adapter.set_listener(listener)
        activation_id = uuid4()

        assert await adapter.submit("ignored") is False
        await adapter.start(activation_id)
        assert adapter.listening is True
        assert await adapter.submit("I lost my card") is True

        assert [e.type for e in events] == [
            SpeechInputEventType.STARTED,
            SpeechInputEventType.FINAL,
        ]
        assert events[-1].text == "I lost my card"
        assert adapter.listening is False

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self) -> None:
        adapter = ConsoleSpeechInput()
        events: list[SpeechInputEvent] = []

        async def listener(event: SpeechInputEvent) -> None:
            events.append(event)

        adapter.set_listener(listener)
        await adapter.start(uuid4())
        await adapter.stop()
        await adapter.stop()

        assert [e.type for e in events] == [
            SpeechInputEventType.STARTED,
            SpeechInputEventType.ABORTED,
        ]


class TestConsoleSpeechOutput:
    @pytest.mark.asyncio
    async def test_prints_and_ends(self) -> None:
        stream = StringIO()
        adapter = ConsoleSpeechOutput(speaker="Aisha", stream=stream)
        events: list[SpeechOutputEvent] = []

        async def listener(event: SpeechOutputEvent) -> None:
            events.append(event)

        adapter.set_listener(listener)
        await adapter.speak("Hello Prithvi.", uuid4())
        await adapter.drain()

        assert stream.getvalue() == "Aisha: Hello Prithvi.\n"
        assert [e.type for e in events] == [
            SpeechOutputEventType.STARTED,
            SpeechOutputEventType.ENDED,
        ]

    @pytest.mark.asyncio
    async def test_cancel_suppresses_ended(self) -> None:
        adapter = ConsoleSpeechOutput(stream=StringIO())
        events: list[SpeechOutputEvent] = []

        async def listener(event: SpeechOutputEvent) -> None:
            events.append(event)

        adapter.set_listener(listener)
        await adapter.speak("Hello", uuid4())
        await adapter.cancel()
        await adapter.cancel()
        await adapter.drain()

        assert [e.type for e in events] == [SpeechOutputEventType.STARTED]

    @pytest.mark.asyncio
    async def test_drain_raises_listener_failure(self) -> None:
        """A failure while handling ENDED surfaces from drain()."""
        adapter = ConsoleSpeechOutput(stream=StringIO())

        async def listener(event: SpeechOutputEvent) -> None:
            if event.type is SpeechOutputEventType.ENDED:
                raise RuntimeError("listen failed")

        adapter.set_listener(listener)
        await adapter.speak("Hello", uuid4())

        with pytest.raises(RuntimeError, match="listen failed"):
            await adapter.drain()

        await adapter.drain()

    @pytest.mark.asyncio
    async def test_drain_without_speech(self) -> None:
        await ConsoleSpeechOutput(stream=StringIO()).drain()
