"""CLI for inspecting and extending the captain's log, using Rich and Typer."""

import asyncio
import time
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from captainslog.core.config import ConfigError, setup_logging
from captainslog.core.factory import build_store, build_summarizer
from captainslog.core.store import LogUnreadableError, MessageStore
from captainslog.core.summary import SummaryKind, summarize_log
from captainslog.core.types import LogStatus, format_timestamp

app = typer.Typer(
    name="captainslog",
    help="Captain's log CLI - read and write the encrypted log",
    no_args_is_help=True,
)

console = Console()


def _open_store() -> MessageStore:
    try:
        return build_store()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def _report_unreadable(error: Exception | None) -> None:
    console.print(
        Panel.fit(
            f"[bold red]Log exists but is unreadable[/bold red]\n{error}",
            title="Error",
            border_style="red",
        )
    )


@app.command()
def show(limit: int = typer.Option(0, help="Only show the last N entries")) -> None:
    """Print the decrypted log."""
    store = _open_store()
    snapshot = asyncio.run(store.load())
    if snapshot.status is LogStatus.UNREADABLE:
        _report_unreadable(snapshot.error)
        raise typer.Exit(1)
    if not snapshot.records:
        console.print("[dim]Captain's log is empty.[/dim]")
        return

    records = snapshot.records[-limit:] if limit > 0 else snapshot.records
    table = Table(title="Captain's log", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("Date", style="green")
    table.add_column("Message")
    offset = len(snapshot.records) - len(records)
    for i, record in enumerate(records, offset + 1):
        table.add_row(str(i), format_timestamp(record.timestamp), Text(record.text))
    console.print(table)


@app.command()
def append(text: str = typer.Argument(..., help="Entry text")) -> None:
    """Add an entry timestamped now."""
    store = _open_store()
    try:
        record = asyncio.run(store.append(int(time.time()), text))
    except LogUnreadableError as e:
        _report_unreadable(e.cause)
        raise typer.Exit(1)
    console.print(f"[green]Saved entry at {format_timestamp(record.timestamp)}[/green]")


@app.command()
def status() -> None:
    """Report whether the log exists and can be decrypted."""
    store = _open_store()
    snapshot = asyncio.run(store.load())
    console.print(f"Log file: {store.path}")
    if snapshot.status is LogStatus.UNREADABLE:
        _report_unreadable(snapshot.error)
        raise typer.Exit(1)
    if snapshot.status is LogStatus.ABSENT:
        console.print("[dim]No log yet.[/dim]")
        return
    console.print(f"[green]OK[/green] - {len(snapshot.records)} entries")


@app.command()
def summarize(
    model: Optional[str] = typer.Option(
        None, help="Claude model to use for the analysis"
    ),
) -> None:
    """Analyze the log, or print it raw if analysis fails."""
    store = _open_store()
    with console.status("Analyzing the log..."):
        summary = asyncio.run(summarize_log(store, build_summarizer(model)))

    if summary.kind is SummaryKind.UNREADABLE:
        _report_unreadable(summary.error)
        raise typer.Exit(1)
    if summary.kind is SummaryKind.EMPTY:
        console.print("[dim]Captain's log is empty.[/dim]")
    elif summary.kind is SummaryKind.ANALYSIS:
        console.print(Panel(Text(summary.text), title="Psychological Analysis"))
    else:
        console.print(f"[yellow]Couldn't generate analysis: {summary.error}[/yellow]")
        console.print(summary.text, markup=False)


def run_cli(args: list[str] | None = None) -> None:
    """Run the CLI."""
    setup_logging()
    app(args=args, prog_name="captainslog cli")


if __name__ == "__main__":
    run_cli()
