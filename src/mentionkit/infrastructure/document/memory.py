"""In-memory document model with atomic mention tokens.

The document is a flat sequence of units: single characters and mention
tokens. The caret is an index into that sequence, so a token occupies
exactly one caret position.
"""

from typing import Optional, Union

from mentionkit.domain.protocols import DocumentListener
from mentionkit.domain.types import ChangeKind, DocumentChange, MentionToken
from mentionkit.logger import get_logger

__all__ = ["InMemoryDocument"]

logger = get_logger("document.memory")

Unit = Union[str, MentionToken]


class InMemoryDocument:
    """Plain-text buffer with embedded mention tokens."""

    def __init__(self, text: str = "") -> None:
        self._units: list[Unit] = list(text)
        self._caret = len(self._units)
        self._listeners: list[DocumentListener] = []

    @property
    def caret(self) -> int:
        return self._caret

    def __len__(self) -> int:
        return len(self._units)

    def add_listener(self, listener: DocumentListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: DocumentListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, change: DocumentChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    def text_before_caret(self) -> str:
        chars: list[str] = []
        index = self._caret - 1
        while index >= 0 and isinstance(self._units[index], str):
            chars.append(self._units[index])  # type: ignore[arg-type]
            index -= 1
        return "".join(reversed(chars))

    def text_after_caret(self) -> str:
        chars: list[str] = []
        index = self._caret
        while index < len(self._units) and isinstance(self._units[index], str):
            chars.append(self._units[index])  # type: ignore[arg-type]
            index += 1
        return "".join(chars)

    def replace_around_caret(
        self,
        before: int,
        after: int,
        replacement: Union[MentionToken, str],
    ) -> None:
        start = self._caret - before
        end = self._caret + after
        if before < 0 or after < 0 or start < 0 or end > len(self._units):
            raise ValueError(
                f"Cannot replace {before} chars before and {after} after caret {self._caret}"
            )
        new_units: list[Unit] = [replacement] if isinstance(replacement, MentionToken) else list(replacement)
        self._units[start:end] = new_units
        self._caret = start + len(new_units)
        self._notify(DocumentChange(ChangeKind.INSERT))

    def type_text(self, text: str) -> None:
        """Insert ``text`` at the caret, one change notification per character."""
        for char in text:
            self.replace_around_caret(0, 0, char)

    def insert_mention(self, token: MentionToken) -> None:
        """Insert a mention token at the caret."""
        self.replace_around_caret(0, 0, token)

    def backspace(self) -> Optional[Unit]:
        """Delete the unit before the caret and return it."""
        if self._caret == 0:
            return None
        removed = self._units.pop(self._caret - 1)
        self._caret -= 1
        removed_mention = removed if isinstance(removed, MentionToken) else None
        self._notify(DocumentChange(ChangeKind.DELETE, removed_mention=removed_mention))
        return removed

    def move_caret(self, position: int) -> None:
        self._caret = max(0, min(position, len(self._units)))
        self._notify(DocumentChange(ChangeKind.CARET))

    def mentions(self) -> list[MentionToken]:
        return [unit for unit in self._units if isinstance(unit, MentionToken)]

    def plain_text(self, enclosure: Optional[tuple[str, str]] = None) -> str:
        """Render the document with mentions written as ``trigger + value``."""
        return "".join(
            unit.as_text(enclosure) if isinstance(unit, MentionToken) else unit
            for unit in self._units
        )

    def segments(self) -> list[Unit]:
        """Document content with consecutive characters joined into strings."""
        result: list[Unit] = []
        for unit in self._units:
            if isinstance(unit, str) and result and isinstance(result[-1], str):
                result[-1] += unit
            else:
                result.append(unit)
        return result
