"""Text-console speech adapters.

Typed lines stand in for recognised speech and printed lines stand in for
synthesis, so a session can run in a terminal.
"""

import asyncio
import sys
from typing import TextIO
from uuid import UUID

from concierge.observability.logging import get_logger
from concierge.speech.base import SpeechInputAdapter, SpeechOutputAdapter
from concierge.speech.events import (
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)

logger = get_logger(__name__)


class ConsoleSpeechInput(SpeechInputAdapter):
    """Capture adapter fed by the console loop via :meth:`submit`."""

    def __init__(self) -> None:
        super().__init__()
        self._activation_id: UUID | None = None

    @property
    def listening(self) -> bool:
        return self._activation_id is not None

    async def start(self, activation_id: UUID) -> None:
        self._activation_id = activation_id
        await self.emit(
            SpeechInputEvent(type=SpeechInputEventType.STARTED, activation_id=activation_id)
        )

    async def stop(self) -> None:
        if self._activation_id is None:
            return
        activation_id, self._activation_id = self._activation_id, None
        await self.emit(
            SpeechInputEvent(type=SpeechInputEventType.ABORTED, activation_id=activation_id)
        )

    async def submit(self, line: str) -> bool:
        """Deliver a typed line as the final transcript.

        Returns:
            False if nothing was listening, so the line was not delivered
        """
        if self._activation_id is None:
            return False
        activation_id, self._activation_id = self._activation_id, None
        await self.emit(
            SpeechInputEvent(
                type=SpeechInputEventType.FINAL,
                activation_id=activation_id,
                text=line,
            )
        )
        return True


class ConsoleSpeechOutput(SpeechOutputAdapter):
    """Synthesis adapter that prints utterances.

    Printing finishes instantly, so ENDED is reported from a separate task
    on the next loop iteration, never from inside ``speak()``.
    """

    def __init__(self, speaker: str = "Assistant", stream: TextIO | None = None) -> None:
        super().__init__()
        self._speaker = speaker
        self._stream = stream or sys.stdout
        self._utterance_id: UUID | None = None
        self._task: asyncio.Task[None] | None = None

    async def speak(self, text: str, utterance_id: UUID) -> None:
        self._utterance_id = utterance_id
        print(f"{self._speaker}: {text}", file=self._stream, flush=True)
        await self.emit(
            SpeechOutputEvent(type=SpeechOutputEventType.STARTED, utterance_id=utterance_id)
        )
        self._task = asyncio.create_task(self._finish(utterance_id))

    async def cancel(self) -> None:
        self._utterance_id = None
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def drain(self) -> None:
        """Wait for the pending ENDED report, if any.

        Raises:
            Exception: Whatever the listener raised while handling ENDED
        """
        task = self._task
        if task is None:
            return
        await asyncio.wait([task])
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("speech_end_failed", error=str(error), exc_info=error)
            raise error

    async def _finish(self, utterance_id: UUID) -> None:
        await asyncio.sleep(0)
        if self._utterance_id != utterance_id:
            return
        self._utterance_id = None
        await self.emit(
            SpeechOutputEvent(type=SpeechOutputEventType.ENDED, utterance_id=utterance_id)
        )
