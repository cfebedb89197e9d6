"""
Trigger scanner.

Finds the single active ``(trigger, query)`` pair in the text before the
caret. When several triggers match at the same position the longest one
wins; triggers of equal length are tried in declaration order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from mentionkit.core.boundary import BoundaryClassifier
from mentionkit.core.config import LENGTH_LIMIT, MentionsConfig
from mentionkit.domain.types import TriggerMatch
from mentionkit.logger import get_logger

logger = get_logger("mentions.scanner")


class TriggerScanner:
    """Scans text before the caret and tracks the last reported match."""

    def __init__(self, triggers: Sequence[str], classifier: BoundaryClassifier) -> None:
        # sorted() is stable, so equal-length triggers keep declaration order
        self._triggers = sorted(triggers, key=len, reverse=True)
        self._classifier = classifier
        self._window = LENGTH_LIMIT + max(len(t) for t in triggers) + 2
        self._last: Optional[TriggerMatch] = None

    @classmethod
    def from_config(cls, config: MentionsConfig, triggers: Sequence[str]) -> "TriggerScanner":
        classifier = BoundaryClassifier(
            triggers,
            config.effective_punctuation,
            allow_spaces=config.allow_spaces,
            enclosure=config.enclosure,
        )
        return cls(triggers, classifier)

    @property
    def triggers(self) -> list[str]:
        return list(self._triggers)

    @property
    def classifier(self) -> BoundaryClassifier:
        return self._classifier

    @property
    def last(self) -> Optional[TriggerMatch]:
        """Match reported by the most recent :meth:`update`."""
        return self._last

    def trigger_at(self, text: str, index: int) -> Optional[str]:
        """Longest trigger literal starting at ``index``, if any."""
        for trigger in self._triggers:
            if text.startswith(trigger, index):
                return trigger
        return None

    def scan(self, text_before_caret: str) -> Optional[TriggerMatch]:
        """
        Find the active trigger in ``text_before_caret``.

        Scans right to left and returns the first position that holds a
        trigger with a valid start boundary and a valid query. Never raises;
        an invalid boundary just yields None.
        """
        text = text_before_caret
        lowest = max(0, len(text) - self._window)
        nearest: Optional[TriggerMatch] = None

        for index in range(len(text) - 1, lowest - 1, -1):
            if text[index] == "\n":
                break
            trigger = self.trigger_at(text, index)
            if trigger is None or not self._classifier.is_valid_trigger_start(text, index):
                continue
            bounds = self._classifier.extract_query(text[index + len(trigger) :])
            if bounds is None:
                continue
            match = TriggerMatch(
                trigger=trigger,
                query=bounds.query,
                span=len(text) - index,
                enclosed=bounds.enclosed,
                closed=bounds.closed,
            )
            if bounds.enclosed or self._classifier.enclosure is None:
                return match
            # An enclosure opened further left still owns everything up to the caret
            if nearest is None:
                nearest = match
        return nearest

    def update(self, text_before_caret: str) -> tuple[Optional[TriggerMatch], bool]:
        """
        Scan and compare with the previous result.

        Returns:
            The current match and whether the ``(trigger, query)`` pair changed
        """
        match = self.scan(text_before_caret)
        previous_key = self._last.key if self._last else None
        current_key = match.key if match else None
        changed = previous_key != current_key
        self._last = match
        if changed:
            logger.debug(f"Trigger changed: {previous_key!r} -> {current_key!r}")
        return match, changed

    def reset(self) -> None:
        """Forget the previous match so the next update reports a change."""
        self._last = None
