"""Domain types for mentions, presentation state and document changes."""

from .document import ChangeKind, DocumentChange
from .items import (
    ComboboxItem,
    ComboboxItemType,
    MentionItem,
    MentionToken,
    MenuItem,
    Metadata,
    MetadataValue,
    RawItem,
    normalize_item,
    normalize_items,
)
from .state import (
    CloseReason,
    PresentationMode,
    PresentationState,
    SearchState,
    TriggerMatch,
)

__all__ = [
    "ChangeKind",
    "CloseReason",
    "ComboboxItem",
    "ComboboxItemType",
    "DocumentChange",
    "MentionItem",
    "MentionToken",
    "MenuItem",
    "Metadata",
    "MetadataValue",
    "PresentationMode",
    "PresentationState",
    "RawItem",
    "SearchState",
    "TriggerMatch",
    "normalize_item",
    "normalize_items",
]
