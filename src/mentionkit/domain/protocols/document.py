"""Document model protocol consumed by the engine."""

from typing import Callable, Protocol, Union

from mentionkit.domain.types import DocumentChange, MentionToken

__all__ = ["DocumentListener", "MentionDocument"]

DocumentListener = Callable[[DocumentChange], None]


class MentionDocument(Protocol):
    """Host editor document as seen by the mention engine.

    Text queries stop at mention tokens: a token is atomic and ends the
    plain-text run that the scanner inspects.
    """

    def text_before_caret(self) -> str:
        """Plain text between the previous mention token (or start) and the caret."""
        ...

    def text_after_caret(self) -> str:
        """Plain text between the caret and the next mention token (or end)."""
        ...

    def replace_around_caret(
        self,
        before: int,
        after: int,
        replacement: Union[MentionToken, str],
    ) -> None:
        """Replace ``before`` chars left and ``after`` chars right of the caret.

        The caret is placed immediately after the replacement.
        """
        ...

    def mentions(self) -> list[MentionToken]:
        """All mention tokens currently in the document, in document order."""
        ...

    def add_listener(self, listener: DocumentListener) -> None:
        """Register a callback fired after every mutation."""
        ...

    def remove_listener(self, listener: DocumentListener) -> None:
        """Unregister a previously added callback."""
        ...
