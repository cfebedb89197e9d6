"""
Query dispatcher: debounces query changes and discards stale lookups.

Every dispatch increments a generation counter. A lookup result is applied
only if the generation it captured is still current, so a slow response can
never overwrite a fresher one. Pending debounce timers are cancelled; lookups
already in flight are left running and their result is ignored.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Optional

from mentionkit.application.sources import ItemSource, StaticItemSource
from mentionkit.core.config import DEFAULT_SEARCH_DELAY
from mentionkit.core.errors import SearchFailure
from mentionkit.domain.types import MentionItem, SearchState
from mentionkit.logger import get_logger

logger = get_logger("mentions.dispatcher")


@dataclass(slots=True)
class DispatchResult:
    """Outcome of a lookup for the current generation."""

    generation: int
    trigger: str
    query: Optional[str]
    state: SearchState
    items: list[MentionItem] = field(default_factory=list)
    error: Optional[SearchFailure] = None


ResultCallback = Callable[[DispatchResult], None]


class QueryDispatcher:
    """Routes ``(trigger, query)`` pairs to the configured item source."""

    def __init__(
        self,
        source: ItemSource,
        on_result: ResultCallback,
        search_delay: int = DEFAULT_SEARCH_DELAY,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            source: Static or search item source
            on_result: Called with the result of every non-stale lookup
            search_delay: Debounce duration in milliseconds (search mode only)
        """
        self._source = source
        self._on_result = on_result
        self._search_delay = search_delay / 1000
        self._generation = 0
        self._state = SearchState.IDLE
        self._task: asyncio.Task | None = None
        self._debouncing: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self.lookup_count = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> SearchState:
        """SearchState of the current generation."""
        return self._state

    @property
    def is_synchronous(self) -> bool:
        """Static sources resolve inside :meth:`dispatch`."""
        return isinstance(self._source, StaticItemSource)

    def dispatch(self, trigger: str, query: Optional[str]) -> int:
        """
        Start resolving a new ``(trigger, query)`` pair.

        Static sources resolve immediately. Search sources wait for the
        debounce delay first, except for a ``None`` query which is looked up
        right away. Must be called from within a running event loop in
        search mode.

        Returns:
            The generation assigned to this dispatch
        """
        self._generation += 1
        generation = self._generation
        self._cancel_debounce()

        if isinstance(self._source, StaticItemSource):
            items = self._source.filter(trigger, query)
            self.lookup_count += 1
            self._state = SearchState.RESOLVED
            self._on_result(DispatchResult(generation, trigger, query, SearchState.RESOLVED, items))
            return generation

        delay = 0.0 if query is None else self._search_delay
        task = asyncio.create_task(self._run(generation, trigger, query, delay))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task

        if delay > 0:
            self._debouncing = task
            self._state = SearchState.DEBOUNCING
        else:
            self._state = SearchState.IN_FLIGHT
        logger.debug(
            f"Dispatched generation {generation} (trigger={trigger!r}, query={query!r}, delay={delay}s)"
        )
        return generation

    def cancel(self) -> None:
        """Invalidate the current generation; any pending result is dropped."""
        self._generation += 1
        self._cancel_debounce()
        if self._state in (SearchState.DEBOUNCING, SearchState.IN_FLIGHT):
            self._state = SearchState.CANCELLED
            logger.debug("Cancelled pending lookup")
        self._task = None

    async def wait(self) -> None:
        """Wait until the task of the current generation has finished."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def aclose(self) -> None:
        """Cancel every task still tracked by the dispatcher."""
        self.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _cancel_debounce(self) -> None:
        if self._debouncing is not None and not self._debouncing.done():
            self._debouncing.cancel()
        self._debouncing = None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, generation: int, trigger: str, query: Optional[str], delay: float) -> None:
        assert not isinstance(self._source, StaticItemSource)

        if delay > 0:
            await asyncio.sleep(delay)
            if self._debouncing is asyncio.current_task():
                self._debouncing = None

        if not self._is_current(generation):
            return

        self._state = SearchState.IN_FLIGHT
        self.lookup_count += 1

        try:
            items = await self._source.search(trigger, query)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not self._is_current(generation):
                logger.debug(f"Ignoring failure of stale generation {generation}: {e}")
                return
            failure = SearchFailure(trigger, query, e)
            logger.warning(str(failure))
            self._state = SearchState.FAILED
            self._on_result(DispatchResult(generation, trigger, query, SearchState.FAILED, error=failure))
            return

        if not self._is_current(generation):
            logger.debug(f"Discarding stale result of generation {generation} (current={self._generation})")
            return

        self._state = SearchState.RESOLVED
        logger.debug(f"Generation {generation} resolved with {len(items)} items")
        self._on_result(DispatchResult(generation, trigger, query, SearchState.RESOLVED, items))
