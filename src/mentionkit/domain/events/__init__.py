"""Event system used by the engine to notify the rendering layer.

Example:
    ```python
    from mentionkit.domain.events import EventBus, MenuOpened

    event_bus = EventBus()
    event_bus.subscribe(MenuOpened, lambda event: print(event.items))
    ```
"""

from .bus import EventBus
from .types import (
    Event,
    HighlightChanged,
    ItemSelected,
    MentionInserted,
    MenuClosed,
    MenuItemsChanged,
    MenuOpened,
    PresentedItem,
    SearchFailed,
    TriggerChanged,
)

__all__ = [
    "EventBus",
    "Event",
    "HighlightChanged",
    "ItemSelected",
    "MentionInserted",
    "MenuClosed",
    "MenuItemsChanged",
    "MenuOpened",
    "PresentedItem",
    "SearchFailed",
    "TriggerChanged",
]
