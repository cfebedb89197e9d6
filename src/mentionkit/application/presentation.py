"""
Presentation state machine for the menu and combobox surfaces.

Tracks ``Closed``, ``Open/Loading`` and ``Open/Ready`` for the single mode
chosen at construction, plus the highlighted row. Every effective
transition publishes exactly one event, followed by a ``HighlightChanged``
when it drops the combobox focus; no-op transitions publish nothing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from mentionkit.domain.events import (
    EventBus,
    HighlightChanged,
    MenuClosed,
    MenuItemsChanged,
    MenuOpened,
    PresentedItem,
)
from mentionkit.domain.types import CloseReason, PresentationMode, PresentationState
from mentionkit.logger import get_logger

logger = get_logger("mentions.presentation")


@dataclass(frozen=True)
class PresentationSnapshot:
    """Read-only view of the presentation state."""

    mode: PresentationMode
    state: PresentationState
    items: tuple[PresentedItem, ...]
    highlighted_index: Optional[int]

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def loading(self) -> bool:
        return self.state is PresentationState.LOADING

    @property
    def highlighted_item(self) -> Optional[PresentedItem]:
        if self.highlighted_index is None:
            return None
        return self.items[self.highlighted_index]


class PresentationStateMachine:
    """Owns openness, loading flag, item list and highlight."""

    def __init__(self, mode: PresentationMode, event_bus: EventBus) -> None:
        self._mode = mode
        self._bus = event_bus
        self._state = PresentationState.CLOSED
        self._items: tuple[PresentedItem, ...] = ()
        self._highlighted: Optional[int] = None

    @property
    def mode(self) -> PresentationMode:
        return self._mode

    @property
    def state(self) -> PresentationState:
        return self._state

    @property
    def items(self) -> tuple[PresentedItem, ...]:
        return self._items

    @property
    def highlighted_index(self) -> Optional[int]:
        return self._highlighted

    @property
    def highlighted_item(self) -> Optional[PresentedItem]:
        return self.snapshot().highlighted_item

    def snapshot(self) -> PresentationSnapshot:
        return PresentationSnapshot(self._mode, self._state, self._items, self._highlighted)

    def present(self, items: Sequence[PresentedItem], loading: bool = False) -> bool:
        """
        Open the surface (or update it) with ``items``.

        Returns:
            True when the transition changed anything and an event was published
        """
        items = tuple(items)
        state = PresentationState.LOADING if loading else PresentationState.READY
        was_open = self._state.is_open
        previous = self._highlighted

        if was_open and state is self._state and items == self._items:
            return False

        self._state = state
        self._items = items
        self._highlighted = self._initial_highlight()

        if was_open:
            self._bus.publish(
                MenuItemsChanged(self._mode, items, loading=loading, highlighted_index=self._highlighted)
            )
        else:
            logger.debug(f"{self._mode.value} opened with {len(items)} items (loading={loading})")
            self._bus.publish(
                MenuOpened(self._mode, items, loading=loading, highlighted_index=self._highlighted)
            )
        self._publish_focus_loss(previous)
        return True

    def close(self, reason: CloseReason) -> bool:
        """Close the surface. Closing an already closed surface is a no-op."""
        if not self._state.is_open:
            return False
        self._state = PresentationState.CLOSED
        self._items = ()
        previous = self._highlighted
        self._highlighted = None
        logger.debug(f"{self._mode.value} closed ({reason.value})")
        self._bus.publish(MenuClosed(self._mode, reason))
        self._publish_focus_loss(previous)
        return True

    def move_highlight(self, delta: int) -> bool:
        """Move the highlight by ``delta`` rows, wrapping around the list."""
        if not self._state.is_open or not self._items:
            return False
        count = len(self._items)
        if self._highlighted is None:
            target = 0 if delta > 0 else count - 1
        else:
            target = (self._highlighted + delta) % count
        return self.set_highlight(target)

    def set_highlight(self, index: Optional[int]) -> bool:
        """Highlight row ``index`` (or nothing). Out-of-range indexes are ignored."""
        if not self._state.is_open:
            return False
        if index is not None and not 0 <= index < len(self._items):
            logger.debug(f"Ignoring highlight of out-of-range row {index}")
            return False
        if index == self._highlighted:
            return False
        self._highlighted = index
        item = self._items[index] if index is not None else None
        self._bus.publish(HighlightChanged(self._mode, index, item))
        return True

    def _publish_focus_loss(self, previous: Optional[int]) -> None:
        if self._mode is PresentationMode.COMBOBOX and previous is not None and self._highlighted is None:
            self._bus.publish(HighlightChanged(self._mode, None, None))

    def _initial_highlight(self) -> Optional[int]:
        if self._mode is PresentationMode.MENU and self._items:
            return 0
        return None
