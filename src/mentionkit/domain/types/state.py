"""State enums and value objects shared across the engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SearchState(Enum):
    """Lifecycle of a single (trigger, query) lookup."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PresentationMode(Enum):
    """The two mutually exclusive presentation modes."""

    MENU = "menu"
    COMBOBOX = "combobox"


class PresentationState(Enum):
    """Openness of the suggestion surface."""

    CLOSED = "closed"
    LOADING = "open_loading"
    READY = "open_ready"

    @property
    def is_open(self) -> bool:
        return self is not PresentationState.CLOSED


class CloseReason(Enum):
    """Why the suggestion surface closed."""

    BOUNDARY_LOST = "boundary_lost"
    CANCELLED = "cancelled"
    BLUR = "blur"
    INSERTED = "inserted"
    SELECTED = "selected"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class TriggerMatch:
    """Active trigger found by the scanner.

    Attributes:
        trigger: The matched trigger literal
        query: Text after the trigger, ``None`` when nothing follows it
        span: Number of characters before the caret covered by trigger and query
        enclosed: Whether the query was opened with the enclosure character
        closed: Whether the closing enclosure character was already typed
    """

    trigger: str
    query: Optional[str]
    span: int
    enclosed: bool = False
    closed: bool = False

    @property
    def key(self) -> tuple[str, Optional[str]]:
        """Identity used for change detection."""
        return (self.trigger, self.query)
