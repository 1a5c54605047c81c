"""
Shared helpers for CLI commands: container construction and rendering.
"""

from typing import Dict, Optional

import typer
from pydantic import ValidationError as SettingsError
from rich.console import Console

from lifebalance.config import Settings, build_oracle, build_store
from lifebalance.container import LifeBalance
from lifebalance.core.errors import StoreError
from lifebalance.oracle import RatingOracle

console = Console()

DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    "-d",
    help="Directory for the file store (overrides LIFEBALANCE_DATA_DIR)",
)


def load_settings(data_dir: Optional[str] = None) -> Settings:
    try:
        settings = Settings.from_env()
    except SettingsError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2)
    if data_dir:
        settings = settings.model_copy(update={"store": "file", "data_dir": data_dir})
    return settings


def open_book(data_dir: Optional[str] = None) -> LifeBalance:
    """Build a loaded LifeBalance container from settings."""
    settings = load_settings(data_dir)
    try:
        store = build_store(settings)
    except StoreError as e:
        console.print(f"[red]Error: cannot open store:[/red] {e}")
        raise typer.Exit(2)
    book = LifeBalance(store)
    book.load()
    return book


def open_oracle(data_dir: Optional[str] = None) -> RatingOracle:
    return build_oracle(load_settings(data_dir))


def friend_names(book: LifeBalance) -> Dict[str, str]:
    return {f.id: f.name for f in book.friends}


def polarity_style(value: str) -> str:
    return "red" if value == "M" else "green"
