"""Event types published by the mention engine.

Each presentation transition publishes exactly one of these events so the
surrounding component can re-render. Events mirror the callbacks of the
menu and combobox surfaces (open, close, select, focus change).
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Union

from mentionkit.core.errors import SearchFailure
from mentionkit.domain.types import (
    CloseReason,
    ComboboxItem,
    MentionToken,
    MenuItem,
    PresentationMode,
)

PresentedItem = Union[MenuItem, ComboboxItem]


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class TriggerChanged(Event):
    """Published when the scanned (trigger, query) pair differs from the previous scan."""

    trigger: Optional[str]
    """Active trigger, or None when no trigger is active."""
    query: Optional[str] = None
    """Query typed after the trigger."""


@dataclass
class MenuOpened(Event):
    """Published when the menu or combobox opens."""

    mode: PresentationMode
    items: tuple[PresentedItem, ...]
    loading: bool = False
    highlighted_index: Optional[int] = None


@dataclass
class MenuItemsChanged(Event):
    """Published when an open surface receives new items or loading state."""

    mode: PresentationMode
    items: tuple[PresentedItem, ...]
    loading: bool = False
    highlighted_index: Optional[int] = None


@dataclass
class MenuClosed(Event):
    """Published when the menu or combobox closes."""

    mode: PresentationMode
    reason: CloseReason


@dataclass
class HighlightChanged(Event):
    """Published when navigation moves the highlighted row.

    In combobox mode this is the focus-change notification; ``item`` is
    None when nothing is focused.
    """

    mode: PresentationMode
    index: Optional[int]
    item: Optional[PresentedItem]


@dataclass
class ItemSelected(Event):
    """Published when the user selects a row."""

    mode: PresentationMode
    item: PresentedItem


@dataclass
class MentionInserted(Event):
    """Published after a mention token replaced the query span."""

    token: MentionToken


@dataclass
class SearchFailed(Event):
    """Published when a search lookup for the current query failed."""

    error: SearchFailure
