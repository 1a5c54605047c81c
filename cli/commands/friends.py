"""
Friend commands: add, list, remove
"""

import json
from typing import Optional

import typer
from rich.table import Table

from lifebalance.core.errors import ValidationError

from ..session import DATA_DIR_OPTION, console, open_book

app = typer.Typer()


@app.command()
def add(
    name: str = typer.Argument(..., help="Display name"),
    rho: float = typer.Option(0.5, "--rho", "-r", help="Relationship coefficient 0.1-1.0"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Add a friend to the network.

    Examples:
        lifebalance friend add Aussy --rho 0.5
    """
    book = open_book(data_dir)
    try:
        friend = book.add_friend(name, rho)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if json_output:
        print(json.dumps({
            "id": friend.id,
            "name": friend.name,
            "relationshipCoefficient": friend.coefficient,
        }, indent=2))
        return

    console.print(f"[green]Added friend[/green] {friend.name} ({friend.id}) ρ={friend.coefficient:.1f}")


@app.command("list")
def list_friends(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List friends with their contribution to the network effect."""
    book = open_book(data_dir)
    network = book.network_effect()

    if json_output:
        print(json.dumps({
            "friends": [c.to_dict() for c in network.breakdown],
            "multiplier": book.network_multiplier(),
            "count": len(network.breakdown),
        }, indent=2))
        return

    if not book.friends:
        console.print("[yellow]No friends in your network yet[/yellow]")
        return

    table = Table(title="Network")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="magenta")
    table.add_column("ρ", justify="right")
    table.add_column("Shared Events", justify="right")
    table.add_column("Contribution", justify="right", style="green")

    for friend, contribution in zip(book.friends, network.breakdown):
        table.add_row(
            friend.id,
            friend.name,
            f"{friend.coefficient:.1f}",
            str(len(contribution.event_ids)),
            f"+{contribution.contribution:.1f}",
        )

    console.print(table)
    console.print(f"\n[bold]Network multiplier:[/bold] {book.network_multiplier():.1f}x")


@app.command()
def remove(
    friend_id: str = typer.Argument(..., help="Friend id"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
):
    """Remove a friend by id. Past events are left untouched."""
    book = open_book(data_dir)
    if book.remove_friend(friend_id):
        console.print(f"[green]Removed friend[/green] {friend_id}")
    else:
        console.print(f"[yellow]No friend with id[/yellow] {friend_id}")
