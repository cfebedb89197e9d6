"""
Utilities for applying selected mentions to a plain-text input field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from textual_autocomplete import TargetState

from mentionkit.domain.types import MentionToken, MenuItem, TriggerMatch
from mentionkit.logger import get_logger

from .mention_completion import CompletionRequest, MentionCompletionStrategy

logger = get_logger("autocomplete.applier")


@dataclass(slots=True)
class ApplyResult:
    """Result of applying a completion value."""

    text: str
    cursor: int
    token: MentionToken


class CompletionApplier:
    """Replaces the scanned query span with the mention's text form."""

    def __init__(self, enclosure: Optional[tuple[str, str]] = None) -> None:
        self._enclosure = enclosure

    def apply(self, item: MenuItem, match: TriggerMatch, state: TargetState) -> ApplyResult:
        text = state.text
        cursor_pos = state.cursor_position
        start = cursor_pos - match.span
        end = cursor_pos

        if match.enclosed and not match.closed and self._enclosure is not None:
            if text[cursor_pos:].startswith(self._enclosure[1]):
                end += 1

        token = MentionToken(trigger=match.trigger, value=item.value, data=item.data)
        mention = token.as_text(self._enclosure)
        new_text = f"{text[:start]}{mention} {text[end:]}"
        new_cursor = start + len(mention) + 1
        logger.info(f"Applied mention {token.key!r} at index {start}")
        return ApplyResult(text=new_text, cursor=new_cursor, token=token)


def should_show_dropdown(strategy: MentionCompletionStrategy, state: TargetState) -> bool:
    """Determine whether the dropdown should be visible."""
    return strategy.match(CompletionRequest(state)) is not None


def compute_search_string(strategy: MentionCompletionStrategy, state: TargetState) -> str:
    """Return the query typed after the active trigger, or an empty string."""
    match = strategy.match(CompletionRequest(state))
    if match is None or match.query is None:
        return ""
    return match.query
