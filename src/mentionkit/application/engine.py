"""
MentionEngine - detection, suggestion and insertion of mentions.

Control flow::

    document change -> TriggerScanner -> QueryDispatcher -> CandidateAssembler
        -> PresentationStateMachine -> (user selection) -> InsertionCoordinator

The engine is single-threaded and cooperative: the only suspension points
are the debounce timer and the caller's search lookup, both owned by the
dispatcher. State changes are reported through the event bus.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

from mentionkit.application.assembler import CandidateAssembler
from mentionkit.application.dispatcher import DispatchResult, QueryDispatcher
from mentionkit.application.insertion import InsertionCoordinator
from mentionkit.application.presentation import PresentationStateMachine
from mentionkit.application.sources import StaticItemSource, create_item_source
from mentionkit.core.config import MenuOptions, MentionsConfig, validate_triggers
from mentionkit.core.errors import ModeMismatchError
from mentionkit.core.scanner import TriggerScanner
from mentionkit.domain.events import (
    EventBus,
    ItemSelected,
    PresentedItem,
    SearchFailed,
    TriggerChanged,
)
from mentionkit.domain.protocols import MentionDocument, SearchFunction
from mentionkit.domain.types import (
    ChangeKind,
    CloseReason,
    ComboboxItem,
    ComboboxItemType,
    DocumentChange,
    MentionItem,
    MentionToken,
    PresentationMode,
    PresentationState,
    RawItem,
    SearchState,
    TriggerMatch,
)
from mentionkit.logger import get_logger

logger = get_logger("mentions.engine")


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the engine state for the rendering layer."""

    mode: PresentationMode
    state: PresentationState
    trigger: Optional[str]
    query: Optional[str]
    search_state: SearchState
    items: tuple[PresentedItem, ...]
    highlighted_index: Optional[int]

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def loading(self) -> bool:
        return self.state is PresentationState.LOADING


class MentionEngine:
    """Mention engine bound to one document and one presentation mode."""

    def __init__(
        self,
        config: MentionsConfig,
        document: MentionDocument,
        *,
        items: Optional[Mapping[str, Sequence[RawItem]]] = None,
        on_search: Optional[SearchFunction] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Validated configuration
            document: Host document model
            items: Static ``trigger -> items`` mapping (static mode)
            on_search: Asynchronous lookup ``(trigger, query) -> items`` (search mode)
            event_bus: Bus receiving notifications; a private one is created if omitted

        Raises:
            ConfigurationConflict: If both or neither of items and on_search are given
            InvalidBoundaryConfiguration: If no usable triggers are configured
            InvalidMentionItem: If a static item is malformed
        """
        self._config = config
        self._document = document
        self._bus = event_bus or EventBus()
        self._source = create_item_source(items, on_search)

        triggers = list(config.triggers)
        if not triggers and isinstance(self._source, StaticItemSource):
            triggers = self._source.triggers
        validate_triggers(triggers)
        self._triggers = triggers

        self._scanner = TriggerScanner.from_config(config, triggers)
        self._dispatcher = QueryDispatcher(self._source, self._on_result, config.search_delay)
        self._assembler = CandidateAssembler(config, triggers)
        self._presenter = PresentationStateMachine(config.presentation_mode, self._bus)
        self._inserter = InsertionCoordinator(document, self._bus, self._scanner.classifier.enclosure)

        self._match: Optional[TriggerMatch] = None
        self._presented_trigger: Optional[str] = None
        self._combobox_pinned = False
        self._focused = True

        document.add_listener(self._on_document_change)
        logger.info(
            f"MentionEngine ready (mode={self.mode.value}, triggers={triggers}, "
            f"source={type(self._source).__name__})"
        )

        if self.mode is PresentationMode.COMBOBOX and getattr(config.mode, "open", False):
            self.open_combobox()

    # ------------------------------------------------------------------ state

    @property
    def config(self) -> MentionsConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def dispatcher(self) -> QueryDispatcher:
        return self._dispatcher

    @property
    def triggers(self) -> list[str]:
        return list(self._triggers)

    @property
    def mode(self) -> PresentationMode:
        return self._presenter.mode

    @property
    def state(self) -> PresentationState:
        return self._presenter.state

    @property
    def items(self) -> tuple[PresentedItem, ...]:
        return self._presenter.items

    @property
    def highlighted_index(self) -> Optional[int]:
        return self._presenter.highlighted_index

    @property
    def active_trigger(self) -> Optional[TriggerMatch]:
        return self._match

    @property
    def focused(self) -> bool:
        return self._focused

    def snapshot(self) -> EngineSnapshot:
        match = self._match
        return EngineSnapshot(
            mode=self.mode,
            state=self.state,
            trigger=match.trigger if match else None,
            query=match.query if match else None,
            search_state=self._dispatcher.state,
            items=self._presenter.items,
            highlighted_index=self._presenter.highlighted_index,
        )

    # --------------------------------------------------------------- scanning

    def handle_text_change(self) -> None:
        """Rescan the text before the caret and react to trigger changes.

        Idempotent: an unchanged ``(trigger, query)`` pair does nothing.
        """
        if self._inserter.in_progress:
            return

        match, changed = self._scanner.update(self._document.text_before_caret())
        self._match = match
        if not changed:
            return

        self._bus.publish(TriggerChanged(match.trigger if match else None, match.query if match else None))

        if match is None:
            self._dispatcher.cancel()
            self._show_idle(CloseReason.BOUNDARY_LOST)
            return

        self._dispatch(match)

    def _on_document_change(self, change: DocumentChange) -> None:
        if self._inserter.in_progress:
            return

        if (
            change.kind is ChangeKind.DELETE
            and change.removed_mention is not None
            and self._config.show_mentions_on_delete
        ):
            logger.debug(f"Mention {change.removed_mention.key!r} deleted, reopening suggestions")
            # The restored text fires its own INSERT change, which rescans
            self._inserter.restore_as_text(change.removed_mention)
            return

        self.handle_text_change()

    def _dispatch(self, match: TriggerMatch) -> None:
        if not self._dispatcher.is_synchronous:
            keep = self._presenter.items if self._presented_trigger == match.trigger else ()
            self._presenter.present(keep, loading=True)
        self._dispatcher.dispatch(match.trigger, match.query)

    def _on_result(self, result: DispatchResult) -> None:
        match = self._match
        if match is None or match.key != (result.trigger, result.query):
            logger.debug(f"Ignoring result for inactive query {(result.trigger, result.query)!r}")
            return

        if result.state is SearchState.FAILED:
            if result.error is not None:
                self._bus.publish(SearchFailed(result.error))
            items = self._build_items(match, ())
        else:
            items = self._build_items(match, result.items)

        self._presented_trigger = match.trigger
        self._presenter.present(items, loading=False)

    def _build_items(self, match: TriggerMatch, items: Sequence[MentionItem]) -> tuple[PresentedItem, ...]:
        current: list[MentionToken] = []
        if self._config.show_current_mentions_as_suggestions:
            current = self._document.mentions()
        if self.mode is PresentationMode.COMBOBOX:
            return self._assembler.combobox_items(match, items, current)
        return self._assembler.menu_items(match, items, current)

    def _show_idle(self, reason: CloseReason) -> None:
        """Presentation when no trigger is active."""
        if self.mode is PresentationMode.COMBOBOX and self._combobox_pinned:
            self._presented_trigger = None
            self._presenter.present(self._assembler.combobox_items(None))
        else:
            self._presented_trigger = None
            self._presenter.close(reason)

    # ------------------------------------------------------------- navigation

    def highlight_next(self) -> bool:
        return self._presenter.move_highlight(1)

    def highlight_previous(self) -> bool:
        return self._presenter.move_highlight(-1)

    def highlight(self, index: Optional[int]) -> bool:
        return self._presenter.set_highlight(index)

    # -------------------------------------------------------------- selection

    def select(self, index: Optional[int] = None) -> Optional[PresentedItem]:
        """
        Select row ``index`` (or the highlighted row).

        Value rows insert a mention token; combobox trigger rows type the
        trigger; combobox additional rows are only reported.

        Returns:
            The selected item, or None when nothing could be selected
        """
        if not self._presenter.state.is_open:
            return None

        items = self._presenter.items
        if index is None:
            item = self._presenter.highlighted_item
        elif 0 <= index < len(items):
            item = items[index]
        else:
            item = None
        if item is None:
            return None

        self._bus.publish(ItemSelected(self.mode, item))

        if isinstance(item, ComboboxItem) and item.item_type is ComboboxItemType.TRIGGER:
            self._inserter.insert_trigger(item.value)
            return item

        if isinstance(item, ComboboxItem) and item.item_type is ComboboxItemType.ADDITIONAL:
            self._dispatcher.cancel()
            self._combobox_pinned = False
            self._presenter.close(CloseReason.SELECTED)
            return item

        match = self._match
        if match is None:
            logger.warning("Selection without an active trigger ignored")
            return None
        self._insert(match, item)
        return item

    def _insert(self, match: TriggerMatch, item: PresentedItem) -> MentionToken:
        self._dispatcher.cancel()
        token = self._inserter.insert(match, item)
        self._combobox_pinned = False
        self._presented_trigger = None
        self._presenter.close(CloseReason.INSERTED)
        self.handle_text_change()
        return token

    def cancel(self) -> bool:
        """Close the surface the way an escape key would."""
        self._dispatcher.cancel()
        self._combobox_pinned = False
        self._presented_trigger = None
        return self._presenter.close(CloseReason.CANCELLED)

    # ------------------------------------------------------------------ focus

    def handle_focus(self) -> None:
        self._focused = True

    def handle_blur(self) -> None:
        """Editor lost focus. Only the anchored menu reacts to blur."""
        self._focused = False
        if self.mode is not PresentationMode.MENU or not self._presenter.state.is_open:
            return

        mode = self._config.mode
        insert_on_blur = isinstance(mode, MenuOptions) and mode.insert_on_blur
        item = self._presenter.highlighted_item
        if insert_on_blur and item is not None and self._match is not None:
            logger.debug(f"Inserting highlighted item {item.value!r} on blur")
            self.select()
            return

        self._dispatcher.cancel()
        self._presented_trigger = None
        self._presenter.close(CloseReason.BLUR)

    # --------------------------------------------------------------- combobox

    def _require_combobox(self, operation: str) -> None:
        if self.mode is not PresentationMode.COMBOBOX:
            raise ModeMismatchError(f"{operation} is only available in combobox mode")

    def open_combobox(self) -> bool:
        """Open the combobox independently of trigger activity."""
        self._require_combobox("open_combobox")
        self._combobox_pinned = True
        if self._presenter.state.is_open:
            return False
        match = self._match
        if match is None:
            return self._presenter.present(self._assembler.combobox_items(None))
        self._dispatch(match)
        return True

    def close_combobox(self) -> bool:
        self._require_combobox("close_combobox")
        self._combobox_pinned = False
        self._dispatcher.cancel()
        self._presented_trigger = None
        return self._presenter.close(CloseReason.EXPLICIT)

    def toggle_combobox(self) -> bool:
        self._require_combobox("toggle_combobox")
        if self._presenter.state.is_open:
            return self.close_combobox()
        return self.open_combobox()

    # -------------------------------------------------------------- lifecycle

    async def wait_for_search(self) -> None:
        """Wait until the current lookup (if any) has finished."""
        await self._dispatcher.wait()

    async def aclose(self) -> None:
        """Detach from the document and drop pending lookups."""
        self._document.remove_listener(self._on_document_change)
        await self._dispatcher.aclose()
        self._presenter.close(CloseReason.CANCELLED)
