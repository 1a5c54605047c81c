"""
Event commands: add, list, remove
"""

import json
from typing import List, Optional

import typer
from rich.table import Table

from lifebalance.core.derive import format_time_ago
from lifebalance.core.errors import ValidationError
from lifebalance.core.events import Polarity

from ..session import DATA_DIR_OPTION, console, friend_names, open_book, open_oracle, polarity_style

app = typer.Typer()


@app.command()
def add(
    description: str = typer.Argument(..., help="What happened"),
    polarity: Polarity = typer.Option(
        ..., "--type", "-t", case_sensitive=False, help="M (misfortune) or G (good fortune)"
    ),
    value: Optional[int] = typer.Option(
        None, "--value", "-v", help="Magnitude 1-20 (asks the rating oracle when omitted)"
    ),
    share: List[str] = typer.Option([], "--share", "-s", help="Friend id (repeatable, G only)"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Log a life event.

    Examples:
        lifebalance event add "Missed the train" --type M --value 6
        lifebalance event add "Got the job" --type G --value 18 --share friend_1_ab12cd3
        lifebalance event add "Flat tyre" --type M
    """
    book = open_book(data_dir)

    if value is None:
        suggestion = open_oracle(data_dir).suggest(description, polarity)
        if suggestion is None:
            console.print("[red]Error:[/red] no rating suggestion available, pass --value 1-20")
            raise typer.Exit(2)
        value = suggestion.rating
        if not json_output:
            console.print(f"[cyan]Suggested magnitude {value}/20:[/cyan] {suggestion.reasoning}")

    if share and polarity is Polarity.NEGATIVE and not json_output:
        console.print("[yellow]Sharing applies to good fortune only; --share ignored[/yellow]")

    try:
        event = book.add_event(polarity, value, description, shared_with=share)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    debt = book.debt()
    if json_output:
        print(json.dumps({
            "id": event.id,
            "type": event.polarity.value,
            "value": event.magnitude,
            "description": event.description,
            "timestamp": event.created_at,
            "sharedWith": list(event.shared_with),
            "debt": debt.to_dict(),
        }, indent=2))
        return

    style = polarity_style(event.polarity.value)
    console.print(
        f"[{style}]Logged {event.polarity.label}[/{style}] {event.id} "
        f"({event.magnitude}/20): {event.description}"
    )
    console.print(f"  Forecast: [bold]{debt.prediction}[/bold]")


@app.command("list")
def list_events(
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Show only the last N events"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List logged events, newest last.

    Examples:
        lifebalance event list
        lifebalance event list --lines 10
        lifebalance event list --json
    """
    book = open_book(data_dir)
    events = list(book.events)
    if lines:
        events = events[-lines:]

    if json_output:
        print(json.dumps({
            "events": [
                {
                    "id": e.id,
                    "type": e.polarity.value,
                    "value": e.magnitude,
                    "description": e.description,
                    "timestamp": e.created_at,
                    "sharedWith": list(e.shared_with),
                }
                for e in events
            ],
            "count": len(events),
        }, indent=2))
        return

    if not events:
        console.print("[yellow]Event log is empty[/yellow]")
        return

    names = friend_names(book)
    now = book.clock.now_ms()
    table = Table(title="Life Events")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Value", justify="right")
    table.add_column("Description")
    table.add_column("Shared With", style="magenta")
    table.add_column("When", style="cyan")

    for e in events:
        style = polarity_style(e.polarity.value)
        table.add_row(
            e.id,
            f"[{style}]{e.polarity.value}[/{style}]",
            str(e.magnitude),
            e.description,
            ", ".join(names.get(fid, "(removed)") for fid in e.shared_with),
            format_time_ago(e.created_at, now),
        )

    console.print(table)
    console.print(f"\n[bold]Total events:[/bold] {len(book.events)}")


@app.command()
def remove(
    event_id: str = typer.Argument(..., help="Event id"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
):
    """Remove an event by id (no-op if absent)."""
    book = open_book(data_dir)
    if book.remove_event(event_id):
        console.print(f"[green]Removed event[/green] {event_id}")
    else:
        console.print(f"[yellow]No event with id[/yellow] {event_id}")
