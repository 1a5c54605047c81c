#!/usr/bin/env python3
"""
Life Balance CLI

Main entrypoint for the lifebalance command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import data, events, friends, status, suggest
from cli.session import load_settings
from lifebalance.logging_config import setup_logging
from lifebalance.metrics import init_metrics, start_metrics_server

# Initialize Typer app
app = typer.Typer(
    name="lifebalance",
    help="Life balance calculator: log misfortunes and good fortunes, forecast what comes next",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(events.app, name="event", help="Event log operations")
app.add_typer(friends.app, name="friend", help="Friend network operations")

# Add standalone commands
app.command("status")(status.status_command)
app.command("timeline")(status.timeline_command)
app.command("suggest")(suggest.suggest_command)
app.command("clear")(data.clear_command)


@app.callback()
def setup():
    """Configure logging and metrics before any command runs."""
    setup_logging()
    init_metrics()
    settings = load_settings()
    start_metrics_server(settings.metrics_enabled, settings.metrics_port)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from lifebalance import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Life Balance CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
