"""Domain models for mention items, menu rows and inserted mention tokens.

Raw items arrive either as bare strings or as mappings with a mandatory
``value`` and primitive metadata. They are normalized once at ingestion and
are immutable afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from mentionkit.core.errors import InvalidMentionItem

MetadataValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat, None]
"""Allowed metadata value kinds: string, boolean, number or absent."""

Metadata = dict[str, MetadataValue]

RawItem = Union[str, Mapping[str, Any], "MentionItem"]


def _default_display_value(data: Any) -> Any:
    if isinstance(data, dict) and data.get("display_value") is None and "value" in data:
        return {**data, "display_value": data["value"]}
    return data


class MentionItem(BaseModel):
    """A candidate retrieved from a static mapping or a search lookup."""

    value: StrictStr = Field(..., description="Mention value without the trigger")
    data: Metadata = Field(default_factory=dict, description="Primitive metadata")

    class Config:
        """Pydantic configuration."""

        frozen = True


class MenuItem(BaseModel):
    """Normalized row shown by the anchored menu."""

    trigger: str = Field(..., description="Trigger that opened the menu")
    value: str = Field(..., description="Value inserted when the row is selected")
    display_value: str = Field(..., description="Text shown for the row")
    data: Optional[Metadata] = Field(None, description="Metadata carried into the mention")
    creatable: bool = Field(default=False, description="Synthetic 'create new' entry")

    @model_validator(mode="before")
    @classmethod
    def fill_display_value(cls, data: Any) -> Any:
        return _default_display_value(data)

    class Config:
        """Pydantic configuration."""

        frozen = True


class ComboboxItemType(str, Enum):
    """Kind of a combobox row."""

    TRIGGER = "trigger"
    VALUE = "value"
    ADDITIONAL = "additional"


class ComboboxItem(BaseModel):
    """Normalized row shown by the detached combobox."""

    item_type: ComboboxItemType = Field(..., description="Trigger, value or additional row")
    value: str = Field(..., description="Trigger text or mention value")
    display_value: str = Field(..., description="Text shown for the row")
    data: Optional[Metadata] = Field(None, description="Metadata carried into the mention")

    @model_validator(mode="before")
    @classmethod
    def fill_display_value(cls, data: Any) -> Any:
        return _default_display_value(data)

    class Config:
        """Pydantic configuration."""

        frozen = True


class MentionToken(BaseModel):
    """Atomic mention inserted into the document."""

    trigger: str
    value: str
    data: Optional[Metadata] = None

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def key(self) -> str:
        """Composite ``trigger + value`` key used for deduplication."""
        return f"{self.trigger}{self.value}"

    def as_text(self, enclosure: tuple[str, str] | None = None) -> str:
        """Render the token as plain text, enclosing values that contain spaces."""
        value = self.value
        if enclosure is not None and any(ch.isspace() for ch in value):
            value = f"{enclosure[0]}{value}{enclosure[1]}"
        return f"{self.trigger}{value}"


def normalize_item(raw: RawItem) -> MentionItem:
    """
    Convert a raw item into a ``MentionItem``.

    Args:
        raw: A bare string, a mapping with a ``value`` key, or a MentionItem

    Returns:
        The normalized item

    Raises:
        InvalidMentionItem: If the value is missing or metadata is not primitive
    """
    if isinstance(raw, MentionItem):
        return raw
    if isinstance(raw, str):
        return MentionItem(value=raw)
    if isinstance(raw, Mapping):
        value = raw.get("value")
        if not isinstance(value, str):
            raise InvalidMentionItem(f"Item {raw!r} has no string 'value'")
        data = {key: item for key, item in raw.items() if key != "value"}
        try:
            return MentionItem(value=value, data=data)
        except ValidationError as e:
            raise InvalidMentionItem(f"Item {value!r} has non-primitive metadata: {e}") from e
    raise InvalidMentionItem(f"Unsupported item type: {type(raw).__name__}")


def normalize_items(raw_items: Iterable[RawItem]) -> list[MentionItem]:
    """Normalize a sequence of raw items, preserving order."""
    return [normalize_item(raw) for raw in raw_items]
