"""
Data commands: wipe the stored event log and friend registry
"""

from typing import Optional

import typer

from ..session import DATA_DIR_OPTION, console, open_book


def clear_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
):
    """
    Delete all events and friends. This cannot be undone.

    Examples:
        lifebalance clear
        lifebalance clear --yes
    """
    if not yes:
        typer.confirm(
            "Are you sure you want to delete all events and friends? This cannot be undone.",
            abort=True,
        )
    book = open_book(data_dir)
    book.clear_all()
    console.print("[green]All events and friends deleted[/green]")
