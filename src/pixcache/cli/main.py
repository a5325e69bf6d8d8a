"""CLI commands for pixcache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from pixcache.core.exceptions import PixcacheError


if TYPE_CHECKING:
    from pixcache import CacheStore


app = typer.Typer(
    name="pixcache",
    help="Classify image locators and cache network images on disk.",
    no_args_is_help=True,
)


@dataclass
class CliContext:
    """Global options shared by all commands."""

    cache_dir: Path | None = None
    namespace: str | None = None


def _fail(error: PixcacheError) -> typer.Exit:
    """Print an error with its recovery hint and return an Exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def load_store(ctx: typer.Context) -> CacheStore:
    """Build the CacheStore for CLI commands from the global options.

    Raises:
        typer.Exit: If configuration is invalid or the store cannot be opened.
    """
    from pixcache import CacheStore
    from pixcache.config import config_from_env

    opts: CliContext = ctx.obj if isinstance(ctx.obj, CliContext) else CliContext()
    try:
        config = config_from_env(namespace=opts.namespace)
        store = CacheStore.from_directory(config=config, cache_root=opts.cache_dir)
    except PixcacheError as e:
        raise _fail(e) from None

    if store.degraded:
        typer.echo(
            f"Warning: cache '{config.namespace}' was unusable; "
            f"using '{store.namespace}'",
            err=True,
        )
    return store


@app.callback()
def root(
    ctx: typer.Context,
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        help="Directory holding cache namespaces (default: $PIXCACHE_CACHE_DIR).",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Cache namespace (default: $PIXCACHE_NAMESPACE or 'pixcache').",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    """Classify image locators and cache network images on disk."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )
    ctx.obj = CliContext(cache_dir=cache_dir, namespace=namespace)


@app.command()
def classify(
    locators: list[str] = typer.Argument(help="Paths or URLs to classify."),
) -> None:
    """Print the resource kind of each locator."""
    from pixcache.core.classifier import classify as classify_locator

    for locator in locators:
        typer.echo(f"{locator}\t{classify_locator(locator).value}")


@app.command()
def fetch(
    ctx: typer.Context,
    locator: str = typer.Argument(help="Path or URL to resolve."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the resource bytes to this file.",
    ),
    asset_root: Path | None = typer.Option(
        None,
        "--asset-root",
        help="Directory that bundled asset paths are relative to.",
    ),
) -> None:
    """Resolve a locator, fetching network images through the cache."""
    from pixcache import ResourceResolver, RichProgressReporter
    from pixcache.core.formatting import format_size

    store = load_store(ctx)
    resolver = ResourceResolver(store, asset_root=asset_root)

    try:
        with RichProgressReporter() as progress:
            resource = resolver.resolve(locator, progress=progress)
    except PixcacheError as e:
        raise _fail(e) from None

    data = resource.data or b""
    size = format_size(len(data))
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        typer.echo(f"{resource.kind.value}: wrote {size} to {output}")
    else:
        typer.echo(f"{resource.kind.value}: {size}")


@app.command()
def prefetch(
    ctx: typer.Context,
    locators: list[str] = typer.Argument(help="URLs to load into the cache."),
    workers: int = typer.Option(
        4,
        "--workers",
        "-w",
        min=1,
        help="Maximum parallel downloads.",
    ),
) -> None:
    """Warm the cache for network locators."""
    from pixcache import RichProgressReporter, ThreadPoolExecutorAdapter
    from pixcache.core.classifier import is_network
    from pixcache.core.exceptions import FetchFailedError

    skipped = [loc for loc in locators if not is_network(loc)]
    for loc in skipped:
        typer.echo(f"Skipping {loc}: not a network locator")
    targets = [loc for loc in locators if is_network(loc)]
    if not targets:
        return

    store = load_store(ctx)
    executor = ThreadPoolExecutorAdapter(max_workers=workers) if workers > 1 else None
    with RichProgressReporter() as progress:
        results = store.prefetch(targets, executor=executor, progress=progress)

    failed = 0
    for loc, outcome in results.items():
        if isinstance(outcome, FetchFailedError):
            failed += 1
            typer.echo(f"{loc}: failed ({outcome})", err=True)
        else:
            typer.echo(f"{loc}: cached")
    if failed:
        raise typer.Exit(1)


@app.command()
def sweep(ctx: typer.Context) -> None:
    """Remove expired entries from the cache."""
    store = load_store(ctx)
    removed = store.sweep_expired()
    typer.echo(f"Removed {removed} expired entr{'y' if removed == 1 else 'ies'}.")


@app.command()
def clear(ctx: typer.Context) -> None:
    """Remove every entry from the cache namespace."""
    store = load_store(ctx)
    try:
        store.clear()
    except PixcacheError as e:
        raise _fail(e) from None
    typer.echo(f"Cleared cache namespace '{store.namespace}'.")


def main() -> None:
    """Entry point for the CLI."""
    app()
