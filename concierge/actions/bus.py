"""ActionBus: in-process publish/subscribe for conversation observers.

The conversation controller publishes domain actions (``action.*``) and
session progress (``session.*``) here. Delivery is synchronous and follows
subscription order. Payloads are frozen models, so observers can read but
never mutate what the controller owns.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from concierge.observability.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[str, Any], None]


@dataclass(frozen=True)
class _Subscription:
    pattern: str
    listener: Listener


class ActionBus:
    """Routes published payloads to subscribers matching the topic.

    Patterns:
    - "*" matches every topic
    - "action.*" matches every topic in the ``action`` category
    - "action.request_completed" matches only that topic

    A failing subscriber is logged and skipped; later subscribers still
    receive the payload.
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def subscribe(self, pattern: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for topics matching ``pattern``.

        Returns:
            A callable that removes this subscription. Calling it twice is harmless.
        """
        subscription = _Subscription(pattern=pattern, listener=listener)
        self._subscriptions.append(subscription)
        logger.debug(
            "bus_listener_registered",
            pattern=pattern,
            total_listeners=len(self._subscriptions),
        )

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
                logger.debug("bus_listener_unregistered", pattern=pattern)

        return unsubscribe

    def publish(self, topic: str, payload: Any) -> int:
        """Deliver ``payload`` to every subscriber whose pattern matches ``topic``.

        Returns:
            Number of subscribers the payload was delivered to
        """
        matching = [
            s for s in list(self._subscriptions) if self._matches_pattern(topic, s.pattern)
        ]
        if not matching:
            logger.debug("no_listeners_for_topic", topic=topic)
            return 0

        delivered = 0
        for subscription in matching:
            try:
                subscription.listener(topic, payload)
            except Exception as e:
                logger.error(
                    "bus_listener_failed",
                    topic=topic,
                    pattern=subscription.pattern,
                    error=str(e),
                    exc_info=True,
                )
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        """Drop every subscription."""
        self._subscriptions.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    @staticmethod
    def _matches_pattern(topic: str, pattern: str) -> bool:
        if pattern == "*":
            return True
        if topic == pattern:
            return True
        if pattern.endswith(".*"):
            return topic.startswith(f"{pattern[:-2]}.")
        return False
