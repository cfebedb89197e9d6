"""
Candidate assembly.

Builds the rows presented for the active trigger, in priority order:
retrieved items, mentions already in the document, the synthetic creatable
entry, then (combobox only) the caller's additional rows. The per-trigger
limit is applied last, so low-priority rows are the first to be dropped.
Input order is preserved; nothing is re-sorted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from mentionkit.application.sources import matches_query
from mentionkit.core.config import ComboboxOptions, MentionsConfig
from mentionkit.domain.types import (
    ComboboxItem,
    ComboboxItemType,
    MentionItem,
    MentionToken,
    MenuItem,
    Metadata,
    TriggerMatch,
)
from mentionkit.logger import get_logger

logger = get_logger("mentions.assembler")


@dataclass(frozen=True, slots=True)
class Candidate:
    """Mode-independent row before normalization."""

    value: str
    display_value: str
    data: Optional[Metadata] = None
    creatable: bool = False
    additional: bool = False


class CandidateAssembler:
    """Turns retrieved items into menu or combobox rows."""

    def __init__(self, config: MentionsConfig, triggers: Sequence[str]) -> None:
        self._config = config
        self._triggers = list(triggers)

    def candidates(
        self,
        match: TriggerMatch,
        items: Sequence[MentionItem],
        current_mentions: Sequence[MentionToken] = (),
        additional: Sequence[Candidate] = (),
    ) -> list[Candidate]:
        """
        Run the assembly pipeline for an active trigger.

        Args:
            match: Active trigger and query
            items: Retrieved or statically filtered items, in source order
            current_mentions: Mention tokens present in the document
            additional: Fixed rows appended after everything else

        Returns:
            Candidates after limit truncation
        """
        trigger, query = match.trigger, match.query
        rows = [
            Candidate(item.value, item.value, dict(item.data) if item.data else None)
            for item in items
        ]

        if self._config.show_current_mentions_as_suggestions:
            seen = {f"{trigger}{row.value}" for row in rows}
            for token in current_mentions:
                if token.trigger != trigger or token.key in seen:
                    continue
                if not matches_query(token.value, query):
                    continue
                seen.add(token.key)
                rows.append(Candidate(token.value, token.value, token.data))

        creatable = self._creatable_candidate(trigger, query, rows)
        limit = self._config.item_limit(trigger)

        if creatable is not None:
            if (
                self._config.reserve_creatable_slot
                and limit is not None
                and limit > 0
                and len(rows) >= limit
            ):
                rows = rows[: limit - 1]
            rows.append(creatable)

        rows.extend(additional)

        if limit is not None and len(rows) > limit:
            logger.debug(f"Truncating {len(rows)} candidates to limit {limit} for {trigger!r}")
            rows = rows[:limit]
        return rows

    def menu_items(
        self,
        match: TriggerMatch,
        items: Sequence[MentionItem],
        current_mentions: Sequence[MentionToken] = (),
    ) -> tuple[MenuItem, ...]:
        """Rows for the anchored menu."""
        return tuple(
            MenuItem(
                trigger=match.trigger,
                value=row.value,
                display_value=row.display_value,
                data=row.data,
                creatable=row.creatable,
            )
            for row in self.candidates(match, items, current_mentions)
        )

    def combobox_items(
        self,
        match: Optional[TriggerMatch],
        items: Sequence[MentionItem] = (),
        current_mentions: Sequence[MentionToken] = (),
    ) -> tuple[ComboboxItem, ...]:
        """
        Rows for the combobox.

        Without an active trigger the combobox lists one row per trigger
        followed by the additional rows, unlimited.
        """
        additional = self._additional_candidates()

        if match is None:
            rows = [ComboboxItem(item_type=ComboboxItemType.TRIGGER, value=t) for t in self._triggers]
            rows.extend(_to_combobox(row) for row in additional)
            return tuple(rows)

        return tuple(
            _to_combobox(row)
            for row in self.candidates(match, items, current_mentions, additional=additional)
        )

    def _creatable_candidate(
        self, trigger: str, query: Optional[str], rows: Sequence[Candidate]
    ) -> Optional[Candidate]:
        template = self._config.creatable_template(trigger)
        if template is None or not query:
            return None
        if any(row.value == query for row in rows):
            return None
        return Candidate(query, template.replace("{{name}}", query), creatable=True)

    def _additional_candidates(self) -> list[Candidate]:
        mode = self._config.mode
        if not isinstance(mode, ComboboxOptions):
            return []
        return [
            Candidate(
                item.value,
                item.display_value if item.display_value is not None else item.value,
                item.data,
                additional=True,
            )
            for item in mode.additional_items
        ]


def _to_combobox(row: Candidate) -> ComboboxItem:
    item_type = ComboboxItemType.ADDITIONAL if row.additional else ComboboxItemType.VALUE
    return ComboboxItem(
        item_type=item_type,
        value=row.value,
        display_value=row.display_value,
        data=row.data,
    )
