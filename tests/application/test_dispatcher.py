"""Tests for debouncing and staleness handling in QueryDispatcher."""

import asyncio

import pytest

from mentionkit.application.dispatcher import QueryDispatcher
from mentionkit.application.sources import SearchItemSource, StaticItemSource
from mentionkit.domain.types import SearchState


class GatedSearch:
    """Search function whose responses are released explicitly per query."""

    def __init__(self, fail_on: set[str] | None = None):
        self.calls: list[tuple[str, str | None]] = []
        self.gates: dict[str | None, asyncio.Event] = {}
        self.fail_on = fail_on or set()

    def gate(self, query: str | None) -> asyncio.Event:
        return self.gates.setdefault(query, asyncio.Event())

    async def __call__(self, trigger: str, query: str | None):
        self.calls.append((trigger, query))
        await self.gate(query).wait()
        if query in self.fail_on:
            raise RuntimeError(f"lookup for {query} failed")
        return [f"{query}-result"]


def test_static_dispatch_resolves_synchronously(people_items) -> None:
    results = []
    dispatcher = QueryDispatcher(StaticItemSource(people_items), results.append)

    generation = dispatcher.dispatch("@", "bo")

    assert dispatcher.is_synchronous
    assert dispatcher.state is SearchState.RESOLVED
    assert len(results) == 1
    assert results[0].generation == generation
    assert [item.value for item in results[0].items] == ["Bob"]


@pytest.mark.asyncio
async def test_debounce_coalesces_rapid_changes() -> None:
    calls = []

    async def search(trigger, query):
        calls.append(query)
        return [query]

    results = []
    dispatcher = QueryDispatcher(SearchItemSource(search), results.append, search_delay=20)

    for query in ["j", "jo", "joh", "john"]:
        dispatcher.dispatch("@", query)
        assert dispatcher.state is SearchState.DEBOUNCING

    await dispatcher.wait()

    assert calls == ["john"]
    assert dispatcher.lookup_count == 1
    assert [r.query for r in results] == ["john"]
    assert dispatcher.state is SearchState.RESOLVED


@pytest.mark.asyncio
async def test_none_query_skips_debounce() -> None:
    search = GatedSearch()
    dispatcher = QueryDispatcher(SearchItemSource(search), lambda r: None, search_delay=10_000)

    dispatcher.dispatch("@", None)

    assert dispatcher.state is SearchState.IN_FLIGHT
    search.gate(None).set()
    await dispatcher.wait()
    assert search.calls == [("@", None)]


@pytest.mark.asyncio
async def test_stale_result_is_discarded() -> None:
    search = GatedSearch()
    results = []
    dispatcher = QueryDispatcher(SearchItemSource(search), results.append, search_delay=0)

    dispatcher.dispatch("@", "a")
    await asyncio.sleep(0)
    dispatcher.dispatch("@", "ab")
    await asyncio.sleep(0)
    assert search.calls == [("@", "a"), ("@", "ab")]

    # The newer lookup finishes first, then the older one
    search.gate("ab").set()
    await dispatcher.wait()
    search.gate("a").set()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert [r.query for r in results] == ["ab"]
    await dispatcher.aclose()


@pytest.mark.asyncio
async def test_cancel_drops_in_flight_result() -> None:
    search = GatedSearch()
    results = []
    dispatcher = QueryDispatcher(SearchItemSource(search), results.append, search_delay=0)

    dispatcher.dispatch("@", "a")
    await asyncio.sleep(0)
    dispatcher.cancel()
    assert dispatcher.state is SearchState.CANCELLED

    search.gate("a").set()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert results == []
    await dispatcher.aclose()


@pytest.mark.asyncio
async def test_failure_reported_for_current_generation() -> None:
    search = GatedSearch(fail_on={"x"})
    search.gate("x").set()
    results = []
    dispatcher = QueryDispatcher(SearchItemSource(search), results.append, search_delay=0)

    dispatcher.dispatch("#", "x")
    await dispatcher.wait()

    assert dispatcher.state is SearchState.FAILED
    assert len(results) == 1
    assert results[0].state is SearchState.FAILED
    assert results[0].error.trigger == "#"
    assert isinstance(results[0].error.cause, RuntimeError)


@pytest.mark.asyncio
async def test_aclose_cancels_pending_tasks() -> None:
    search = GatedSearch()
    dispatcher = QueryDispatcher(SearchItemSource(search), lambda r: None, search_delay=0)
    dispatcher.dispatch("@", "a")
    await asyncio.sleep(0)

    await dispatcher.aclose()

    assert dispatcher.state is SearchState.CANCELLED
