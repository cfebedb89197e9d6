"""
Boundary rules deciding where a mention may start and where its query ends.

A trigger is valid only at the start of the text or after whitespace or a
punctuation character that does not complete another trigger. A query ends at
punctuation, at whitespace (unless spaces are allowed), at a newline, or at
the closing enclosure character.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from mentionkit.core.config import LENGTH_LIMIT


@dataclass(frozen=True, slots=True)
class QueryBounds:
    """Query extracted from the text following a trigger."""

    query: Optional[str]
    enclosed: bool = False
    closed: bool = False


class BoundaryClassifier:
    """Classifies characters around a candidate trigger position."""

    def __init__(
        self,
        triggers: Sequence[str],
        punctuation: str,
        allow_spaces: bool = True,
        enclosure: Optional[tuple[str, str]] = None,
        length_limit: int = LENGTH_LIMIT,
    ) -> None:
        self._triggers = tuple(triggers)
        self._punctuation = frozenset(punctuation)
        self._allow_spaces = allow_spaces
        # Enclosures only make sense when spaces are allowed
        self._enclosure = enclosure if allow_spaces else None
        self._length_limit = length_limit

    @property
    def enclosure(self) -> Optional[tuple[str, str]]:
        return self._enclosure

    def is_valid_trigger_start(self, text: str, index: int) -> bool:
        """Return ``True`` when a trigger may begin at ``text[index]``."""
        if index == 0:
            return True
        if text.endswith(self._triggers, 0, index):
            return False
        previous = text[index - 1]
        return previous.isspace() or previous in self._punctuation

    def terminates_query(self, char: str) -> bool:
        """Return ``True`` when ``char`` ends an unenclosed query."""
        if char == "\n" or char in self._punctuation:
            return True
        return char.isspace() and not self._allow_spaces

    def extract_query(self, raw: str) -> Optional[QueryBounds]:
        """
        Extract the query from the text between a trigger and the caret.

        Args:
            raw: Text after the trigger, up to the caret

        Returns:
            The query bounds, or None when no valid query can be formed
        """
        if not raw:
            return QueryBounds(query=None)

        if self._enclosure is not None and raw.startswith(self._enclosure[0]):
            return self._extract_enclosed(raw[1:])

        if len(raw) > self._length_limit:
            return None
        if raw[0].isspace():
            return None
        if any(self.terminates_query(ch) for ch in raw):
            return None
        if self._allow_spaces and _has_double_space(raw):
            return None
        if any(trigger in raw for trigger in self._triggers):
            return None
        if self._enclosure is not None and self._enclosure[1] in raw:
            return None
        return QueryBounds(query=raw)

    def _extract_enclosed(self, inner: str) -> Optional[QueryBounds]:
        assert self._enclosure is not None
        closing = self._enclosure[1]
        close_at = inner.find(closing)

        if close_at == -1:
            query, closed = inner, False
        elif close_at == len(inner) - 1:
            query, closed = inner[:close_at], True
        else:
            # Text typed after the closing character ends the mention
            return None

        if "\n" in query or len(query) > self._length_limit:
            return None
        return QueryBounds(query=query, enclosed=True, closed=closed)


def _has_double_space(text: str) -> bool:
    return any(a.isspace() and b.isspace() for a, b in zip(text, text[1:]))
