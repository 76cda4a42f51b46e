"""Console session runner.

Usage:
    python -m concierge
    python -m concierge --policy generative --no-voice

Type what you would say; an empty line is silence. ``/voice`` toggles
spoken replies and ``/quit`` ends the session.
"""

import argparse
import asyncio
import sys
from typing import Any

from concierge.actions.bus import ActionBus, Listener
from concierge.actions.models import Notice, RequestCompleted, ResponseReady, Topic
from concierge.config import get_settings
from concierge.conversation.controller import ConversationController
from concierge.observability.logging import get_logger, setup_logging
from concierge.policy.factory import create_policy
from concierge.speech.console import ConsoleSpeechInput, ConsoleSpeechOutput

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Talk to the residence assistant")
    parser.add_argument(
        "--policy",
        choices=["rules", "generative"],
        default=None,
        help="Dialogue policy (defaults to conversation.policy from config)",
    )
    parser.add_argument("--no-voice", action="store_true", help="Render replies as text only")
    parser.add_argument(
        "--no-auto-continue",
        action="store_true",
        help="Do not listen again automatically after a reply",
    )
    return parser.parse_args(argv)


def render_confirmation(_topic: str, action: Any) -> None:
    """Print the confirmation summary for a completed request."""
    if not isinstance(action, RequestCompleted):
        return
    print("-" * 40)
    print("REQUEST FINALIZED")
    print(f"  Service : {action.service}")
    print(f"  Fee     : {action.fee}")
    print(f"  Ref ID  : #{action.reference_id}")
    print("-" * 40)


def render_notice(_topic: str, notice: Any) -> None:
    if not isinstance(notice, Notice):
        return
    print(f"[!] {notice.message}", file=sys.stderr)
    detail = notice.details.get("detail")
    if detail:
        print(f"    {detail}", file=sys.stderr)


def render_text_reply(speaker: str) -> Listener:
    def _render(_topic: str, response: Any) -> None:
        if isinstance(response, ResponseReady) and not response.spoken:
            print(f"{speaker} (text): {response.text}")

    return _render


async def read_line(prompt: str) -> str | None:
    try:
        return await asyncio.to_thread(input, prompt)
    except EOFError:
        return None


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    setup_logging(settings.observability.logging, debug=settings.debug)

    try:
        policy = create_policy(settings, args.policy)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    assistant_name = settings.assistant.name
    speech_input = ConsoleSpeechInput()
    speech_output = ConsoleSpeechOutput(speaker=assistant_name)
    bus = ActionBus()
    bus.subscribe(Topic.REQUEST_COMPLETED, render_confirmation)
    bus.subscribe(Topic.NOTICE, render_notice)
    bus.subscribe(Topic.RESPONSE, render_text_reply(assistant_name))

    controller = ConversationController(
        policy=policy,
        speech_input=speech_input,
        speech_output=speech_output,
        bus=bus,
        auto_continue=settings.conversation.auto_continue and not args.no_auto_continue,
        voice_enabled=settings.conversation.voice_enabled and not args.no_voice,
        processing_delay=settings.conversation.processing_delay_ms / 1000.0,
    )

    try:
        await controller.start(settings.assistant.render_greeting())
        await speech_output.drain()

        while True:
            line = await read_line("You: ")
            if line is None or line.strip() == "/quit":
                break
            if line.strip() == "/voice":
                await controller.set_voice_enabled(not controller.voice_enabled)
                print(f"Voice {'on' if controller.voice_enabled else 'off'}")
                continue

            if not speech_input.listening:
                await controller.submit_user_toggle_listen()
            await speech_input.submit(line)
            await speech_output.drain()
    finally:
        await controller.end()
        await policy.close()

    logger.info("console_session_closed")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
