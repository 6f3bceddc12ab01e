from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table

from slash_engine.commands.models import Command, HistoryEntry

console = Console()


def render_notification(message: str, succeeded: bool = True) -> None:
    """Show a one-line outcome notice."""
    if succeeded:
        console.print(f"[green]✓ {message}[/green]")
    else:
        console.print(f"[bold red]error: {message}[/bold red]")


def render_commands(
    commands: Sequence[Command],
    empty_message: str,
    selected_index: Optional[int] = None,
) -> None:
    """Print the visible commands as a table."""
    if not commands:
        console.print(f"[dim]{empty_message}[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Command")
    table.add_column("Agent", style="dim")
    table.add_column("Description", style="dim")
    for index, command in enumerate(commands):
        name = f"/{command.name}"
        if index == selected_index:
            name = f"[reverse]{name}[/reverse]"
        table.add_row(name, command.agent or "", command.description or "")
    console.print(table)


def render_history(entries: Iterable[HistoryEntry]) -> None:
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Time", style="dim")
    table.add_column("Command")
    table.add_column("Result")
    for entry in entries:
        result = "[green]ok[/green]" if entry.succeeded else f"[red]{entry.error_message}[/red]"
        table.add_row(entry.timestamp.strftime("%H:%M:%S"), f"/{entry.command_name}", result)
    console.print(table)
