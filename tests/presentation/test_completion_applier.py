from textual_autocomplete import TargetState

from mentionkit.core.config import MentionsConfig
from mentionkit.domain.types import MenuItem, TriggerMatch
from mentionkit.presentation.completion import (
    CompletionApplier,
    MentionCompletionStrategy,
    compute_search_string,
    should_show_dropdown,
)


def make_state(text: str, cursor: int | None = None) -> TargetState:
    if cursor is None:
        cursor = len(text)
    return TargetState(text=text, cursor_position=cursor)


def test_apply_replaces_query_span() -> None:
    applier = CompletionApplier()
    state = make_state("ping @jo")

    result = applier.apply(MenuItem(trigger="@", value="Jon"), TriggerMatch("@", "jo", 3), state)

    assert result.text == "ping @Jon "
    assert result.cursor == len("ping @Jon ")
    assert result.token.key == "@Jon"


def test_apply_keeps_text_after_cursor() -> None:
    applier = CompletionApplier()
    state = make_state("#do later", cursor=3)

    result = applier.apply(MenuItem(trigger="#", value="docs"), TriggerMatch("#", "do", 3), state)

    assert result.text == "#docs  later"
    assert result.cursor == len("#docs ")


def test_apply_encloses_values_with_spaces() -> None:
    applier = CompletionApplier(('"', '"'))
    state = make_state('cc @"John D"', cursor=len('cc @"John D'))
    match = TriggerMatch("@", "John D", len('@"John D'), enclosed=True)

    result = applier.apply(MenuItem(trigger="@", value="John Doe"), match, state)

    assert result.text == 'cc @"John Doe" '
    assert result.cursor == len(result.text)


def test_search_string_and_dropdown_visibility(people_items) -> None:
    strategy = MentionCompletionStrategy.from_config(MentionsConfig(), people_items)

    assert compute_search_string(strategy, make_state("ping @jo")) == "jo"
    assert compute_search_string(strategy, make_state("ping @")) == ""
    assert compute_search_string(strategy, make_state("ping")) == ""
    assert should_show_dropdown(strategy, make_state("ping @"))
    assert not should_show_dropdown(strategy, make_state("ping @jo."))
