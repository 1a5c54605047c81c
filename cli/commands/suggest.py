"""
Suggest command: ask the rating oracle for a magnitude
"""

import json

import typer

from lifebalance.core.events import Polarity

from ..session import console, open_oracle


def suggest_command(
    description: str = typer.Argument(..., help="What happened"),
    polarity: Polarity = typer.Option(
        ..., "--type", "-t", case_sensitive=False, help="M (misfortune) or G (good fortune)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Ask the rating oracle for a 1-20 magnitude.

    Exits with code 1 when no suggestion is available.

    Examples:
        lifebalance suggest "Lost my wallet" --type M
    """
    suggestion = open_oracle().suggest(description, polarity)

    if suggestion is None:
        if json_output:
            print(json.dumps({"error": "suggestion unavailable"}))
        else:
            console.print("[yellow]No suggestion available. Choose a magnitude manually.[/yellow]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(suggestion.model_dump(), indent=2))
    else:
        console.print(f"[bold]Suggested magnitude:[/bold] [cyan]{suggestion.rating}/20[/cyan]")
        console.print(f"  {suggestion.reasoning}")

