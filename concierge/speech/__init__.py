"""Speech adapters and their event contracts."""

from concierge.speech.base import SpeechInputAdapter, SpeechOutputAdapter
from concierge.speech.console import ConsoleSpeechInput, ConsoleSpeechOutput
from concierge.speech.events import (
    CaptureErrorKind,
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)
from concierge.speech.mock import MockSpeechInput, MockSpeechOutput

__all__ = [
    "CaptureErrorKind",
    "ConsoleSpeechInput",
    "ConsoleSpeechOutput",
    "MockSpeechInput",
    "MockSpeechOutput",
    "SpeechInputAdapter",
    "SpeechInputEvent",
    "SpeechInputEventType",
    "SpeechOutputAdapter",
    "SpeechOutputEvent",
    "SpeechOutputEventType",
]
