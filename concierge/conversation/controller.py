"""Conversation controller: the turn-taking state machine.

States: IDLE, LISTENING, PROCESSING, SPEAKING, ERROR. The controller owns
the state and the session history, commands the speech adapters, asks the
dialogue policy for responses and announces actions on the bus.

Every exit from a state releases that state's resource first: capture is
stopped when leaving LISTENING, speech is cancelled when leaving SPEAKING.
Adapter events carry the activation or utterance id they belong to, and
events for anything but the current one are dropped, so late callbacks
never move a session that has already moved on.
"""

from __future__ import annotations

import asyncio
from uuid import UUID, uuid4

from concierge.actions.bus import ActionBus
from concierge.actions.models import (
    Notice,
    ResponseReady,
    StateChanged,
    Topic,
    TranscriptUpdated,
)
from concierge.config.settings import Settings
from concierge.conversation.errors import (
    NoticeKind,
    apology_for,
    capture_message,
    failure_details,
)
from concierge.conversation.history import History
from concierge.conversation.models import ConversationState, PolicyResult, Turn, TurnRole
from concierge.observability.logging import bind_session, get_logger, unbind_session
from concierge.policy.base import DialoguePolicy, PolicyError
from concierge.speech.base import SpeechInputAdapter, SpeechOutputAdapter
from concierge.speech.events import (
    CaptureErrorKind,
    SpeechInputEvent,
    SpeechInputEventType,
    SpeechOutputEvent,
    SpeechOutputEventType,
)

logger = get_logger(__name__)


class ConversationController:
    """Runs one conversation session at a time.

    Example:
        controller = ConversationController(
            policy=RuleBasedPolicy(),
            speech_input=MockSpeechInput(),
            speech_output=MockSpeechOutput(),
        )
        await controller.start("Hello. How can I help you?")
        await controller.submit_user_toggle_listen()
    """

    def __init__(
        self,
        policy: DialoguePolicy,
        speech_input: SpeechInputAdapter,
        speech_output: SpeechOutputAdapter,
        bus: ActionBus | None = None,
        *,
        auto_continue: bool = True,
        voice_enabled: bool = True,
        processing_delay: float = 0.0,
    ) -> None:
        """Initialize the controller and take ownership of the adapters.

        Args:
            policy: Dialogue policy consulted once per user turn
            speech_input: Capture adapter; its events are routed here
            speech_output: Synthesis adapter; its events are routed here
            bus: Bus for actions and session events (a private one if omitted)
            auto_continue: Listen again after the assistant finishes a reply
            voice_enabled: Speak replies; when False replies are text only
            processing_delay: Minimum seconds spent in PROCESSING
        """
        self._policy = policy
        self._speech_input = speech_input
        self._speech_output = speech_output
        self._bus = bus or ActionBus()
        self._auto_continue = auto_continue
        self._voice_enabled = voice_enabled
        self._processing_delay = processing_delay

        self._state = ConversationState.IDLE
        self._history = History()
        self._session_id: UUID | None = None
        # Bumped by start()/end(); policy results from an older epoch are dropped
        self._epoch = 0
        self._activation_id: UUID | None = None
        self._utterance_id: UUID | None = None
        self._continue_after_speech = False

        speech_input.set_listener(self.handle_input_event)
        speech_output.set_listener(self.handle_output_event)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        policy: DialoguePolicy,
        speech_input: SpeechInputAdapter,
        speech_output: SpeechOutputAdapter,
        bus: ActionBus | None = None,
    ) -> ConversationController:
        """Build a controller configured by the ``conversation`` settings."""
        conversation = settings.conversation
        return cls(
            policy=policy,
            speech_input=speech_input,
            speech_output=speech_output,
            bus=bus,
            auto_continue=conversation.auto_continue,
            voice_enabled=conversation.voice_enabled,
            processing_delay=conversation.processing_delay_ms / 1000.0,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def history(self) -> tuple[Turn, ...]:
        return self._history.turns

    @property
    def bus(self) -> ActionBus:
        return self._bus

    @property
    def policy(self) -> DialoguePolicy:
        return self._policy

    @property
    def session_id(self) -> UUID | None:
        return self._session_id

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    @property
    def auto_continue(self) -> bool:
        return self._auto_continue

    # ------------------------------------------------------------------
    # Session boundary
    # ------------------------------------------------------------------

    async def start(self, greeting_text: str) -> None:
        """Begin a fresh session and speak the greeting.

        A session already in progress is ended first. The greeting is not
        recorded in the history.
        """
        if self._session_id is not None:
            await self.end()

        self._epoch += 1
        self._history.clear()
        self._session_id = uuid4()
        bind_session(self._session_id)
        logger.info(
            "session_started",
            policy=self._policy.name,
            voice_enabled=self._voice_enabled,
            auto_continue=self._auto_continue,
        )
        await self._respond(greeting_text, continue_after=self._auto_continue)

    async def submit_user_toggle_listen(self) -> None:
        """The resident pressed the microphone button.

        Starts listening from IDLE; from LISTENING or SPEAKING it stops
        capture, silences speech and returns to IDLE. Ignored while a
        response is being decided.
        """
        if self._state in (ConversationState.IDLE, ConversationState.ERROR):
            await self._begin_listening()
        elif self._state in (ConversationState.LISTENING, ConversationState.SPEAKING):
            await self._release()
            await self._speech_output.cancel()
            self._set_state(ConversationState.IDLE)
        else:
            logger.debug("toggle_ignored", state=self._state.value)

    async def set_voice_enabled(self, enabled: bool) -> None:
        """Turn spoken replies on or off.

        Disabling always cancels speech. An utterance cut off this way does
        not trigger its auto-continue listen; the session returns to IDLE.
        """
        self._voice_enabled = enabled
        logger.info("voice_toggled", enabled=enabled, state=self._state.value)
        if enabled:
            return

        was_speaking = self._state is ConversationState.SPEAKING
        self._utterance_id = None
        self._continue_after_speech = False
        await self._speech_output.cancel()
        if was_speaking:
            self._set_state(ConversationState.IDLE)

    async def end(self) -> None:
        """Tear the session down. Nothing survives: history is discarded."""
        self._epoch += 1
        await self._release()
        await self._speech_output.cancel()
        turns = len(self._history)
        self._history.clear()
        self._set_state(ConversationState.IDLE)
        logger.info("session_ended", turns=turns)
        self._session_id = None
        unbind_session()

    # ------------------------------------------------------------------
    # Adapter events
    # ------------------------------------------------------------------

    async def handle_input_event(self, event: SpeechInputEvent) -> None:
        """React to the capture adapter."""
        if (
            event.activation_id != self._activation_id
            or self._state is not ConversationState.LISTENING
        ):
            logger.debug(
                "input_event_ignored",
                event_type=event.type.value,
                state=self._state.value,
            )
            return

        if event.type is SpeechInputEventType.STARTED:
            return
        if event.type is SpeechInputEventType.PARTIAL:
            self._bus.publish(Topic.TRANSCRIPT, TranscriptUpdated(text=event.text))
            return

        # Terminal: the adapter has already stopped on its own
        self._activation_id = None

        if event.type is SpeechInputEventType.FINAL:
            utterance = event.text.strip()
            self._bus.publish(Topic.TRANSCRIPT, TranscriptUpdated(text=utterance, final=True))
            if not utterance:
                logger.debug("empty_utterance")
                self._set_state(ConversationState.IDLE)
                return
            await self._process(utterance)
        elif event.type is SpeechInputEventType.ERROR:
            self._capture_failed(event.error or CaptureErrorKind.OTHER, event.message)
        else:
            self._set_state(ConversationState.IDLE)

    async def handle_output_event(self, event: SpeechOutputEvent) -> None:
        """React to the synthesis adapter."""
        if (
            event.utterance_id != self._utterance_id
            or self._state is not ConversationState.SPEAKING
        ):
            logger.debug(
                "output_event_ignored",
                event_type=event.type.value,
                state=self._state.value,
            )
            return

        if event.type is SpeechOutputEventType.STARTED:
            return

        if event.type is SpeechOutputEventType.ERROR:
            # Audio failure must not stall the conversation
            logger.warning("output_error", message=event.message)

        self._utterance_id = None
        continue_after = self._continue_after_speech
        self._continue_after_speech = False
        if continue_after:
            await self._begin_listening()
        else:
            self._set_state(ConversationState.IDLE)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def _begin_listening(self) -> None:
        await self._release()
        if not self._speech_input.supported:
            self._capture_failed(CaptureErrorKind.UNSUPPORTED, None)
            return

        activation_id = uuid4()
        self._activation_id = activation_id
        self._set_state(ConversationState.LISTENING)
        await self._speech_input.start(activation_id)

    async def _process(self, utterance: str) -> None:
        self._set_state(ConversationState.PROCESSING)
        epoch = self._epoch

        if self._processing_delay > 0:
            await asyncio.sleep(self._processing_delay)

        try:
            result = await self._policy.decide(utterance, self._history.turns)
        except PolicyError as e:
            if self._is_stale(epoch):
                return
            await self._policy_failed(utterance, e)
            return
        except Exception as e:
            if self._is_stale(epoch):
                return
            logger.error(
                "policy_crashed",
                policy=self._policy.name,
                error=str(e),
                exc_info=True,
            )
            self._set_state(ConversationState.ERROR)
            self._bus.publish(
                Topic.NOTICE,
                Notice(kind=NoticeKind.POLICY_CRASHED, message="Something went wrong."),
            )
            self._set_state(ConversationState.IDLE)
            return

        if self._is_stale(epoch):
            logger.info("policy_result_discarded", policy=self._policy.name)
            return

        await self._complete_turn(utterance, result)

    async def _complete_turn(self, utterance: str, result: PolicyResult) -> None:
        self._history.append(TurnRole.USER, utterance)
        self._history.append(TurnRole.ASSISTANT, result.response_text)
        logger.info(
            "turn_completed",
            policy=self._policy.name,
            turns=len(self._history),
            action=result.action.tag.value if result.action else None,
        )

        if result.action is not None:
            logger.info(
                "action_published",
                tag=result.action.tag.value,
                reference_id=result.action.reference_id,
            )
            self._bus.publish(result.action.topic, result.action)

        await self._respond(result.response_text, continue_after=self._auto_continue)

    async def _policy_failed(self, utterance: str, error: PolicyError) -> None:
        apology = apology_for(error.kind)
        logger.warning(
            "policy_failed",
            policy=self._policy.name,
            error_kind=error.kind.value,
            error=str(error),
        )
        self._history.append(TurnRole.USER, utterance)
        self._history.append(TurnRole.ASSISTANT, apology)
        self._bus.publish(
            Topic.NOTICE,
            Notice(
                kind=NoticeKind.POLICY_ERROR,
                message=apology,
                details=failure_details(error),
            ),
        )
        await self._respond(apology, continue_after=False)

    async def _respond(self, text: str, continue_after: bool) -> None:
        """Speak ``text`` or, with voice off, render it and move on."""
        self._bus.publish(
            Topic.RESPONSE, ResponseReady(text=text, spoken=self._voice_enabled)
        )

        if not self._voice_enabled:
            if continue_after:
                await self._begin_listening()
            else:
                await self._release()
                self._set_state(ConversationState.IDLE)
            return

        await self._release()
        await self._speech_output.cancel()
        utterance_id = uuid4()
        self._utterance_id = utterance_id
        # Captured now; a later change of settings cannot retroactively trigger a listen
        self._continue_after_speech = continue_after
        self._set_state(ConversationState.SPEAKING)
        await self._speech_output.speak(text, utterance_id)

    def _capture_failed(self, kind: CaptureErrorKind, message: str | None) -> None:
        notice_kind = (
            NoticeKind.CAPTURE_UNSUPPORTED
            if kind is CaptureErrorKind.UNSUPPORTED
            else NoticeKind.CAPTURE_ERROR
        )
        logger.warning("capture_failed", error_kind=kind.value, message=message)
        self._set_state(ConversationState.ERROR)
        self._bus.publish(
            Topic.NOTICE,
            Notice(
                kind=notice_kind,
                message=capture_message(kind.value),
                details={"error_kind": kind.value},
            ),
        )
        self._set_state(ConversationState.IDLE)

    async def _release(self) -> None:
        """Stop whatever adapter the current state holds."""
        if self._activation_id is not None:
            self._activation_id = None
            await self._speech_input.stop()
        if self._utterance_id is not None:
            self._utterance_id = None
            self._continue_after_speech = False
            await self._speech_output.cancel()

    def _is_stale(self, epoch: int) -> bool:
        return epoch != self._epoch or self._state is not ConversationState.PROCESSING

    def _set_state(self, state: ConversationState) -> None:
        previous = self._state
        if previous is state:
            return
        self._state = state
        logger.debug("state_transition", previous=previous.value, current=state.value)
        self._bus.publish(
            Topic.STATE, StateChanged(previous=previous.value, current=state.value)
        )
