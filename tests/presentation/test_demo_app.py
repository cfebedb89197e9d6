import pytest
from textual.widgets import Input, RichLog
from textual_autocomplete import TargetState

from mentionkit.core.config import MentionsConfig
from mentionkit.domain.types import MentionToken
from mentionkit.presentation.tui import MentionDemoApp
from mentionkit.presentation.widgets import MentionAutoComplete


@pytest.mark.asyncio
async def test_demo_app_mounts_autocomplete(people_items):
    app = MentionDemoApp(MentionsConfig(), people_items)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.autocomplete, MentionAutoComplete)
        assert app.query_one("#mention-input", Input).has_focus


@pytest.mark.asyncio
async def test_apply_completion_updates_input(people_items):
    app = MentionDemoApp(MentionsConfig(), people_items)

    async with app.run_test() as pilot:
        await pilot.pause()
        input_widget = app.query_one("#mention-input", Input)
        input_widget.value = "hi @al"
        input_widget.cursor_position = len("hi @al")
        state = TargetState(text=input_widget.value, cursor_position=input_widget.cursor_position)

        app.autocomplete._collect_candidates(state)
        app.autocomplete.apply_completion("Alice", state)
        await pilot.pause()

        assert input_widget.value == "hi @Alice "
        assert input_widget.cursor_position == len("hi @Alice ")
        assert app.autocomplete.mentions == [MentionToken(trigger="@", value="Alice")]
        assert not app.autocomplete.should_show_dropdown("")


@pytest.mark.asyncio
async def test_submit_logs_message_and_resets(people_items):
    app = MentionDemoApp(MentionsConfig(), people_items)

    async with app.run_test() as pilot:
        await pilot.pause()
        input_widget = app.query_one("#mention-input", Input)
        input_widget.value = "hello there"
        await input_widget.action_submit()
        await pilot.pause()

        assert input_widget.value == ""
        assert len(app.query_one("#messages", RichLog).lines) == 1
