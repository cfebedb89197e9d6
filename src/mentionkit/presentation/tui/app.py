"""
MentionDemoApp - small Textual application exercising mention completion.
"""

from collections.abc import Mapping, Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Input, RichLog

from rich.text import Text

from mentionkit.core.config import MentionsConfig
from mentionkit.domain.types import RawItem
from mentionkit.logger import get_logger
from mentionkit.presentation.completion import CompletionApplier, MentionCompletionStrategy
from mentionkit.presentation.widgets import MentionAutoComplete

logger = get_logger("mention_tui")


class MentionDemoApp(App):
    """
    Single input with mention autocomplete and a log of submitted messages.

    Layout:
    ┌──────────────────────────────┐
    │            Header            │
    ├──────────────────────────────┤
    │        Submitted log         │
    ├──────────────────────────────┤
    │            Input             │
    ├──────────────────────────────┤
    │            Footer            │
    └──────────────────────────────┘
    """

    TITLE = "mentionkit"
    SUB_TITLE = "Mention autocomplete demo"

    CSS = """
    #messages {
        height: 1fr;
        border: round $primary;
    }
    #mention-input {
        dock: bottom;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+l", "clear_log", "Clear Log"),
    ]

    def __init__(self, config: MentionsConfig, items: Mapping[str, Sequence[RawItem]]):
        super().__init__()
        self.mentions_config = config
        self.strategy = MentionCompletionStrategy.from_config(config, items)
        self.applier = CompletionApplier(self.strategy.scanner.classifier.enclosure)
        self.autocomplete: MentionAutoComplete | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical():
            yield RichLog(id="messages", markup=False, wrap=True)
            triggers = " ".join(self.strategy.scanner.triggers)
            yield Input(placeholder=f"Type a message, mention with {triggers}", id="mention-input")
        yield Footer()

    def on_mount(self) -> None:
        input_widget = self.query_one("#mention-input", Input)
        self.autocomplete = MentionAutoComplete(input_widget, self.strategy, self.applier)
        self.mount(self.autocomplete)
        input_widget.focus()
        logger.info("MentionDemoApp mounted")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if not event.value.strip():
            return
        log = self.query_one("#messages", RichLog)
        mentions = self.autocomplete.mentions if self.autocomplete else []
        line = Text(event.value)
        if mentions:
            line.append("  ")
            line.append(", ".join(token.key for token in mentions), style="bold cyan")
        log.write(line)
        if self.autocomplete:
            self.autocomplete.mentions = []
        self.strategy.settle("")
        event.input.value = ""

    def action_clear_log(self) -> None:
        self.query_one("#messages", RichLog).clear()
