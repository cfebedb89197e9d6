import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

# Import logger setup first to ensure logging is configured
from mentionkit.logger import get_logger, setup_logger
from mentionkit.application.engine import EngineSnapshot, MentionEngine
from mentionkit.core.config import MentionsConfig, load_items, load_mentions_config
from mentionkit.core.errors import MentionError
from mentionkit.infrastructure.document import InMemoryDocument
from mentionkit.utils import env_flag

load_dotenv()

console = Console()

cli = typer.Typer(
    name="mentionkit",
    help="Trigger-based mention detection, suggestion and insertion",
    epilog="""
    Examples:
    $ mentionkit scan "ping @jo" --items items.json
    $ mentionkit demo --items items.json --config mentions.json
    """,
    add_completion=False,
)

DebugOption = typer.Option(
    env_flag(os.getenv("MENTIONKIT_DEBUG"), False), "--debug", help="Enable debug logging"
)


def _load(items: Path, config: Optional[Path]) -> tuple[MentionsConfig, dict]:
    try:
        mentions_config = load_mentions_config(config) if config else MentionsConfig()
        raw_items = load_items(items)
    except (OSError, json.JSONDecodeError, ValidationError, TypeError, MentionError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    return mentions_config, raw_items


def render_snapshot(snapshot: EngineSnapshot) -> Table:
    """Render the open menu or combobox as a rich table."""
    table = Table(
        title=f"{snapshot.mode.value}: trigger={snapshot.trigger!r} query={snapshot.query!r}",
        show_lines=False,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Value", style="bold")
    table.add_column("Display")
    table.add_column("Kind", style="cyan")
    table.add_column("Data", style="dim")

    for index, item in enumerate(snapshot.items):
        if hasattr(item, "item_type"):
            kind = item.item_type.value
        else:
            kind = "creatable" if item.creatable else "value"
        marker = f"> {index}" if index == snapshot.highlighted_index else str(index)
        table.add_row(marker, item.value, item.display_value, kind, str(item.data or ""))
    return table


@cli.command()
def scan(
    text: str = typer.Argument(..., help="Text before the caret"),
    items: Path = typer.Option(..., "--items", help="JSON file mapping triggers to items"),
    config: Optional[Path] = typer.Option(None, "--config", help="JSON engine configuration"),
    debug: bool = DebugOption,
):
    """Show the suggestions the engine presents for TEXT."""
    setup_logger(log_level="DEBUG" if debug else "INFO")
    logger = get_logger("main")

    mentions_config, raw_items = _load(items, config)
    try:
        engine = MentionEngine(mentions_config, InMemoryDocument(text), items=raw_items)
    except MentionError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    engine.handle_text_change()
    snapshot = engine.snapshot()
    logger.info(f"scan {text!r}: state={snapshot.state.value}, items={len(snapshot.items)}")

    if not snapshot.is_open:
        console.print("[yellow]No active mention trigger[/yellow]")
        return
    console.print(render_snapshot(snapshot))


@cli.command()
def demo(
    items: Path = typer.Option(..., "--items", help="JSON file mapping triggers to items"),
    config: Optional[Path] = typer.Option(None, "--config", help="JSON engine configuration"),
    debug: bool = DebugOption,
):
    """Run the interactive mention autocomplete demo."""
    setup_logger(log_level="DEBUG" if debug else "INFO")
    logger = get_logger("main")

    from mentionkit.presentation.tui import MentionDemoApp

    mentions_config, raw_items = _load(items, config)
    try:
        app = MentionDemoApp(mentions_config, raw_items)
    except MentionError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    logger.info("Starting mention demo")
    app.run()


def run():
    """Entry point for the mentionkit CLI."""
    cli()


if __name__ == "__main__":
    run()
