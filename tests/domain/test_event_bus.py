"""Tests for the event bus."""

import pytest

from mentionkit.domain.events import Event, EventBus, MenuClosed, TriggerChanged
from mentionkit.domain.types import CloseReason, PresentationMode


class TestEventBus:
    def test_publish_to_subscribers_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(TriggerChanged, lambda e: calls.append(("first", e.trigger)))
        bus.subscribe(TriggerChanged, lambda e: calls.append(("second", e.trigger)))

        bus.publish(TriggerChanged("@", "jo"))

        assert calls == [("first", "@"), ("second", "@")]

    def test_events_routed_by_type(self):
        bus = EventBus()
        received = []
        bus.subscribe(MenuClosed, received.append)

        bus.publish(TriggerChanged("@"))
        bus.publish(MenuClosed(PresentationMode.MENU, CloseReason.CANCELLED))

        assert len(received) == 1
        assert received[0].reason is CloseReason.CANCELLED

    def test_duplicate_subscription_ignored(self):
        bus = EventBus()
        received = []
        bus.subscribe(TriggerChanged, received.append)
        bus.subscribe(TriggerChanged, received.append)

        bus.publish(TriggerChanged(None))

        assert len(received) == 1

    def test_async_handler_rejected(self):
        bus = EventBus()

        async def handler(event):
            pass

        with pytest.raises(TypeError):
            bus.subscribe(TriggerChanged, handler)

    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(TriggerChanged, broken)
        bus.subscribe(TriggerChanged, received.append)

        bus.publish(TriggerChanged("#"))

        assert len(received) == 1

    def test_unsubscribe_and_clear(self):
        bus = EventBus()
        received = []
        bus.subscribe(TriggerChanged, received.append)
        bus.unsubscribe(TriggerChanged, received.append)
        bus.unsubscribe(TriggerChanged, received.append)

        bus.publish(TriggerChanged("@"))
        assert received == []

        bus.subscribe(TriggerChanged, received.append)
        assert bus.has_subscribers(TriggerChanged)
        bus.clear()
        assert not bus.has_subscribers(TriggerChanged)

    def test_base_class_subscription_sees_every_event(self):
        bus = EventBus()
        received = []
        bus.subscribe(Event, received.append)

        bus.publish(TriggerChanged("@"))
        bus.publish(MenuClosed(PresentationMode.COMBOBOX, CloseReason.EXPLICIT))

        assert [type(e) for e in received] == [TriggerChanged, MenuClosed]
        assert bus.has_subscribers(MenuClosed)

    def test_subscribe_returns_unsubscribe(self):
        bus = EventBus()
        received = []
        stop = bus.subscribe(TriggerChanged, received.append)

        stop()
        bus.publish(TriggerChanged("@"))

        assert received == []
