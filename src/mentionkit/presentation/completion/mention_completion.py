"""
Mention completion strategy for configured triggers.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

from textual_autocomplete import DropdownItem, TargetState

from mentionkit.application.assembler import CandidateAssembler
from mentionkit.application.sources import StaticItemSource
from mentionkit.core.config import MentionsConfig, validate_triggers
from mentionkit.core.scanner import TriggerScanner
from mentionkit.domain.types import MentionToken, MenuItem, RawItem, TriggerMatch
from mentionkit.logger import get_logger

logger = get_logger("autocomplete.mentions")


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """Input text and cursor handed over by the autocomplete widget."""

    state: TargetState

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def text_before_cursor(self) -> str:
        return self.state.text[: self.state.cursor_position]


class MentionCompletionStrategy:
    """Produces menu rows when the text before the cursor holds an active trigger."""

    def __init__(
        self,
        scanner: TriggerScanner,
        source: StaticItemSource,
        assembler: CandidateAssembler,
    ) -> None:
        self._scanner = scanner
        self._source = source
        self._assembler = assembler
        self._rows: list[MenuItem] = []
        # Text up to the end of the last applied mention; never rescanned
        self._settled = ""

    @classmethod
    def from_config(
        cls, config: MentionsConfig, items: Mapping[str, Sequence[RawItem]]
    ) -> "MentionCompletionStrategy":
        source = StaticItemSource(items)
        triggers = list(config.triggers) or source.triggers
        validate_triggers(triggers)
        return cls(
            TriggerScanner.from_config(config, triggers),
            source,
            CandidateAssembler(config, triggers),
        )

    @property
    def scanner(self) -> TriggerScanner:
        return self._scanner

    def match(self, request: CompletionRequest) -> Optional[TriggerMatch]:
        text = request.text_before_cursor
        if self._settled and text.startswith(self._settled):
            text = text[len(self._settled) :]
        return self._scanner.scan(text)

    def settle(self, text_before_cursor: str) -> None:
        """Mark everything before the cursor as applied so it is not scanned again."""
        self._settled = text_before_cursor

    def can_handle(self, request: CompletionRequest) -> bool:
        return self.match(request) is not None

    def get_candidates(
        self, request: CompletionRequest, current_mentions: Sequence[MentionToken] = ()
    ) -> list[DropdownItem]:
        match = self.match(request)
        if match is None:
            self._rows = []
            return []

        items = self._source.filter(match.trigger, match.query)
        rows = self._assembler.menu_items(match, items, current_mentions)
        self._rows = list(rows)
        logger.debug(
            f"MentionCompletionStrategy (trigger={match.trigger!r}, query={match.query!r}) "
            f"returning {len(rows)} rows"
        )
        return [DropdownItem(main=row.display_value, prefix=row.trigger) for row in rows]

    def item_for(self, display_value: str, index: Optional[int] = None) -> Optional[MenuItem]:
        """
        Menu row produced by the last :meth:`get_candidates` call.

        ``index`` is the dropdown position of the chosen row; it decides
        between rows sharing a label. Without it the first row with the
        label is returned.
        """
        if index is not None and 0 <= index < len(self._rows):
            row = self._rows[index]
            if row.display_value == display_value:
                return row
        return next((row for row in self._rows if row.display_value == display_value), None)
