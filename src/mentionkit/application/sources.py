"""
Item sources for the dispatcher.

Two mutually exclusive sourcing modes: a static ``trigger -> items`` mapping
filtered locally, or an asynchronous search function.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Optional, Union

from mentionkit.core.errors import ConfigurationConflict
from mentionkit.domain.protocols import SearchFunction
from mentionkit.domain.types import MentionItem, RawItem, normalize_item, normalize_items
from mentionkit.logger import get_logger

logger = get_logger("mentions.sources")


def matches_query(value: str, query: Optional[str]) -> bool:
    """Case-insensitive substring match; a missing or empty query matches everything."""
    if not query:
        return True
    return query.lower() in value.lower()


class StaticItemSource:
    """Filters a fixed mapping of items synchronously."""

    def __init__(self, items: Mapping[str, Sequence[RawItem]]) -> None:
        # Normalized eagerly so invalid metadata fails at construction
        self._items: dict[str, list[MentionItem]] = {
            trigger: normalize_items(raw_items) for trigger, raw_items in items.items()
        }

    @property
    def triggers(self) -> list[str]:
        return list(self._items)

    def filter(self, trigger: str, query: Optional[str]) -> list[MentionItem]:
        items = self._items.get(trigger, [])
        matches = [item for item in items if matches_query(item.value, query)]
        logger.debug(
            f"Static filter (trigger={trigger!r}, query={query!r}): {len(matches)}/{len(items)} items"
        )
        return matches


class SearchItemSource:
    """Delegates lookups to a caller-supplied coroutine function."""

    def __init__(self, search: SearchFunction) -> None:
        self._search = search

    async def search(self, trigger: str, query: Optional[str]) -> list[MentionItem]:
        raw_items = await self._search(trigger, query)
        return [normalize_item(raw) for raw in raw_items]


ItemSource = Union[StaticItemSource, SearchItemSource]


def create_item_source(
    items: Optional[Mapping[str, Sequence[RawItem]]] = None,
    on_search: Optional[SearchFunction] = None,
) -> ItemSource:
    """
    Build the item source for an engine.

    Raises:
        ConfigurationConflict: If both or neither of ``items`` and ``on_search`` are given
    """
    if items is not None and on_search is not None:
        raise ConfigurationConflict("Static items and a search function are mutually exclusive")
    if items is not None:
        return StaticItemSource(items)
    if on_search is not None:
        return SearchItemSource(on_search)
    raise ConfigurationConflict("Either static items or a search function is required")
