"""Status command for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from pixcache.cli.formatting import _stats_rows
from pixcache.cli.main import app, load_store


@app.command()
def status(ctx: typer.Context) -> None:
    """Show entry count, expiry and size of the cache namespace."""
    store = load_store(ctx)

    table = Table(title="pixcache")
    table.add_column("Field")
    table.add_column("Value")
    for label, value in _stats_rows(store.stats()):
        table.add_row(label, value)

    console = Console(force_terminal=True)
    console.print(table)
