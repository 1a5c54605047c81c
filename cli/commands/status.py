"""
Status commands: headline figures and running balance
"""

import json
from typing import Optional

import typer
from rich.table import Table

from lifebalance.core.derive import format_ratio
from lifebalance.core.results import DebtStatus

from ..session import DATA_DIR_OPTION, console, open_book

_DEBT_STYLE = {
    DebtStatus.BALANCED: "cyan",
    DebtStatus.NEED_POSITIVE: "green",
    DebtStatus.NEED_NEGATIVE: "red",
}


def status_command(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show balance, debt forecast, network effect and ratio health.

    Examples:
        lifebalance status
        lifebalance status --json
    """
    book = open_book(data_dir)
    summary = book.summary()
    network = book.network_effect()
    snapshot = book.snapshot()

    if json_output:
        output = summary.to_dict()
        output["network_breakdown"] = [c.to_dict() for c in network.breakdown]
        output["event_count"] = len(snapshot.events)
        output["friend_count"] = len(snapshot.friends)
        output["snapshot_hash"] = snapshot.digest()
        print(json.dumps(output, indent=2))
        return

    debt, ratio = summary.debt, summary.ratio
    style = _DEBT_STYLE[debt.status]

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Direct balance[/bold]", f"{summary.direct_balance:+d}")
    table.add_row("[bold]Network effect[/bold]", f"+{summary.network_effect:.1f}")
    table.add_row("[bold]Total balance[/bold]", f"{summary.total_balance:+.1f}")
    table.add_row("[bold]Network multiplier[/bold]", f"{summary.network_multiplier:.1f}x")
    table.add_row("[bold]Debt[/bold]", f"[{style}]{debt.status.value} ({debt.net_debt:+d})[/{style}]")
    table.add_row("[bold]Forecast[/bold]", debt.prediction)
    table.add_row(
        "[bold]M:G ratio[/bold]",
        f"{format_ratio(ratio.ratio)} (target {ratio.theoretical_ratio:.1f})",
    )
    table.add_row(
        "[bold]Ratio health[/bold]",
        "[green]healthy[/green]" if ratio.is_healthy else "[red]unhealthy[/red]",
    )
    console.print(table)

    if ratio.warning:
        console.print(f"\n[yellow]{ratio.warning}[/yellow]")


def timeline_command(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the running balance after each event.

    Examples:
        lifebalance timeline
        lifebalance timeline --json
    """
    book = open_book(data_dir)
    points = book.timeline()

    if json_output:
        print(json.dumps({"points": [p.to_dict() for p in points]}, indent=2))
        return

    table = Table(title="Running Balance")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Type")
    table.add_column("Direct", justify="right")
    table.add_column("With Network", justify="right", style="magenta")

    for p in points:
        kind = "-" if p.polarity is None else p.polarity.value
        table.add_row(str(p.index), kind, f"{p.direct:+d}", f"{p.network:+.1f}")

    console.print(table)
