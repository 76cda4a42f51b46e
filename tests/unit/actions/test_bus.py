"""Tests for the ActionBus."""

from typing import Any

import pytest
from pydantic import ValidationError

from concierge.actions.bus import ActionBus
from concierge.actions.models import RequestCompleted, Topic, new_reference_id


class TestSubscribe:
    """Tests for subscription and delivery."""

    def test_delivers_in_subscription_order(self) -> None:
        """Subscribers receive a payload in the order they subscribed."""
        bus = ActionBus()
        calls: list[str] = []
        bus.subscribe("action.*", lambda t, p: calls.append("first"))
        bus.subscribe("*", lambda t, p: calls.append("second"))
        bus.subscribe(Topic.REQUEST_COMPLETED, lambda t, p: calls.append("third"))

        delivered = bus.publish(Topic.REQUEST_COMPLETED, object())

        assert calls == ["first", "second", "third"]
        assert delivered == 3

    def test_delivery_is_synchronous(self) -> None:
        """publish returns only after every subscriber has run."""
        bus = ActionBus()
        seen: list[Any] = []
        bus.subscribe("session.state", lambda t, p: seen.append(p))

        bus.publish("session.state", "idle")

        assert seen == ["idle"]

    def test_pattern_matching(self) -> None:
        """Wildcard, category and exact patterns select topics."""
        bus = ActionBus()
        received: dict[str, list[str]] = {"all": [], "session": [], "exact": []}
        bus.subscribe("*", lambda t, p: received["all"].append(t))
        bus.subscribe("session.*", lambda t, p: received["session"].append(t))
        bus.subscribe("session.notice", lambda t, p: received["exact"].append(t))

        bus.publish("session.state", None)
        bus.publish("session.notice", None)
        bus.publish("action.request_completed", None)
        bus.publish("sessions.other", None)

        assert received["all"] == [
            "session.state",
            "session.notice",
            "action.request_completed",
            "sessions.other",
        ]
        assert received["session"] == ["session.state", "session.notice"]
        assert received["exact"] == ["session.notice"]

    def test_no_subscribers(self) -> None:
        assert ActionBus().publish("action.request_completed", None) == 0

    def test_unsubscribe(self) -> None:
        """Unsubscribed listeners stop receiving; unsubscribing twice is harmless."""
        bus = ActionBus()
        calls: list[str] = []
        unsubscribe = bus.subscribe("*", lambda t, p: calls.append(t))

        bus.publish("a.b", None)
        unsubscribe()
        unsubscribe()
        bus.publish("a.c", None)

        assert calls == ["a.b"]
        assert bus.subscriber_count == 0

    def test_failing_listener_does_not_block_others(self) -> None:
        """A raising subscriber is skipped and later ones still run."""
        bus = ActionBus()
        calls: list[str] = []

        def broken(topic: str, payload: Any) -> None:
            raise RuntimeError("render failed")

        bus.subscribe("*", broken)
        bus.subscribe("*", lambda t, p: calls.append(t))

        delivered = bus.publish("action.request_completed", None)

        assert calls == ["action.request_completed"]
        assert delivered == 1


class TestRequestCompleted:
    """Tests for the RequestCompleted action."""

    def test_reference_id_minted_on_creation(self) -> None:
        first = RequestCompleted(service="Access Card Replacement", fee="250 AED")
        second = RequestCompleted(service="Access Card Replacement", fee="250 AED")

        assert first.reference_id
        assert first.reference_id.startswith("EMR-")
        assert first.reference_id != second.reference_id
        assert first.topic == Topic.REQUEST_COMPLETED

    def test_is_frozen(self) -> None:
        """Observers cannot alter an action."""
        action = RequestCompleted(service="Access Card Replacement", fee="250 AED")
        with pytest.raises(ValidationError):
            action.fee = "0 AED"  # type: ignore[misc]

    def test_reference_ids_are_unique(self) -> None:
        ids = {new_reference_id() for _ in range(500)}
        assert len(ids) == 500
