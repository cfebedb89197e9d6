"""
Mention autocomplete overlay for a textual ``Input``.
"""

from __future__ import annotations

from textual.widgets import Input
from textual_autocomplete import AutoComplete, DropdownItem, TargetState

from mentionkit.domain.types import MentionToken
from mentionkit.logger import get_logger
from mentionkit.presentation.completion import (
    CompletionApplier,
    CompletionRequest,
    MentionCompletionStrategy,
    compute_search_string,
    should_show_dropdown as helper_should_show_dropdown,
)

logger = get_logger("mention_input")


class MentionAutoComplete(AutoComplete):
    """Overlay listing mention suggestions for the trigger before the cursor."""

    def __init__(
        self,
        input_widget: Input,
        strategy: MentionCompletionStrategy,
        applier: CompletionApplier,
    ) -> None:
        self._strategy = strategy
        self._applier = applier
        self.mentions: list[MentionToken] = []
        super().__init__(
            target=input_widget,
            candidates=self._collect_candidates,
            prevent_default_enter=True,
        )

    def _collect_candidates(self, state: TargetState) -> list[DropdownItem]:
        candidates = self._strategy.get_candidates(CompletionRequest(state), self.mentions)
        logger.debug(f"Collected {len(candidates)} mention candidates")
        return candidates

    def get_matches(
        self,
        target_state: TargetState,
        candidates: list[DropdownItem],
        search_string: str,
    ) -> list[DropdownItem]:
        """
        Candidates are already filtered and limited in priority order, so
        fuzzy re-ranking is skipped.
        """
        return candidates

    def get_search_string(self, target_state: TargetState) -> str:
        return compute_search_string(self._strategy, target_state)

    def apply_completion(self, value: str, state: TargetState) -> None:
        request = CompletionRequest(state)
        match = self._strategy.match(request)
        item = self._strategy.item_for(value, self.option_list.highlighted)
        if match is None or item is None:
            logger.warning(f"No active mention for completion {value!r}")
            return

        result = self._applier.apply(item, match, state)
        self._strategy.settle(result.text[: result.cursor])
        self.target.value = result.text
        self.target.cursor_position = result.cursor
        self.mentions.append(result.token)
        logger.info(f"Applied mention; new cursor={result.cursor}")

    def should_show_dropdown(self, _search_string: str) -> bool:
        state = TargetState(text=self.target.value, cursor_position=self.target.cursor_position)
        return helper_should_show_dropdown(self._strategy, state)
