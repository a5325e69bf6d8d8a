"""Kinds command for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from pixcache.cli.formatting import _format_kind_with_color
from pixcache.cli.main import app
from pixcache.core.classifier import classify


@app.command()
def kinds(
    locators: list[str] = typer.Argument(help="Paths or URLs to classify."),
) -> None:
    """Show a colored table of locators and their resource kinds."""
    table = Table()
    table.add_column("Locator")
    table.add_column("Kind")
    for locator in locators:
        table.add_row(locator, _format_kind_with_color(classify(locator)))

    console = Console(force_terminal=True)
    console.print(table)
