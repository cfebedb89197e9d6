"""
Insertion of selected items into the document.

Replaces the scanned span (trigger, query and any enclosure delimiters) with
one atomic mention token and leaves the caret right after it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional, Union

from mentionkit.domain.events import EventBus, MentionInserted
from mentionkit.domain.protocols import MentionDocument
from mentionkit.domain.types import ComboboxItem, MentionToken, MenuItem, TriggerMatch
from mentionkit.logger import get_logger

logger = get_logger("mentions.insertion")


class InsertionCoordinator:
    """Applies document mutations on behalf of the engine.

    While a mutation is in progress :attr:`in_progress` is True, so change
    notifications fired synchronously by the document can be ignored.
    """

    def __init__(
        self,
        document: MentionDocument,
        event_bus: EventBus,
        enclosure: Optional[tuple[str, str]] = None,
    ) -> None:
        self._document = document
        self._bus = event_bus
        self._enclosure = enclosure
        self._depth = 0

    @property
    def in_progress(self) -> bool:
        return self._depth > 0

    @contextmanager
    def _mutating(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def insert(self, match: TriggerMatch, item: Union[MenuItem, ComboboxItem]) -> MentionToken:
        """
        Replace the query span of ``match`` with a mention for ``item``.

        An enclosure left open before the caret is consumed together with its
        closing character when that character sits right after the caret.
        """
        after = 0
        if match.enclosed and not match.closed and self._enclosure is not None:
            if self._document.text_after_caret().startswith(self._enclosure[1]):
                after = 1

        token = MentionToken(trigger=match.trigger, value=item.value, data=item.data)
        with self._mutating():
            self._document.replace_around_caret(match.span, after, token)

        logger.info(f"Inserted mention {token.key!r} replacing {match.span + after} chars")
        self._bus.publish(MentionInserted(token))
        return token

    def insert_trigger(self, trigger: str) -> None:
        """Type ``trigger`` at the caret, starting a new mention."""
        self._document.replace_around_caret(0, 0, trigger)
        logger.debug(f"Inserted trigger {trigger!r}")

    def restore_as_text(self, token: MentionToken) -> None:
        """Put a deleted mention back as editable plain text before the caret."""
        self._document.replace_around_caret(0, 0, token.as_text(self._enclosure))
        logger.debug(f"Restored deleted mention {token.key!r} as text")
