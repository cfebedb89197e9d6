"""Shared fixtures for mention engine tests."""

from typing import Any

import pytest

from mentionkit.domain.events import Event, EventBus


class EventRecorder:
    """Collects every event published on a bus, in order."""

    def __init__(self, event_bus: EventBus):
        self.events: list[Event] = []
        event_bus.subscribe(Event, self.events.append)

    def of_type(self, event_type: type) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(event_bus: EventBus) -> EventRecorder:
    return EventRecorder(event_bus)


@pytest.fixture
def people_items() -> dict[str, list[Any]]:
    return {
        "@": [
            "Alice",
            "Bob",
            {"value": "John Doe", "email": "john@example.com"},
            "Johanna",
            "Jon",
        ],
        "#": ["bug", "feature", "docs"],
    }
