"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from pixcache.core.formatting import format_period, format_size, kind_to_color


if TYPE_CHECKING:
    from pixcache.core.models import CacheStats, ResourceKind


def _format_kind_with_color(kind: ResourceKind) -> Text:
    """Format a ResourceKind with its color."""
    color = kind_to_color(kind)
    return Text(kind.value, style=color) if color else Text(kind.value)


def _stats_rows(stats: CacheStats) -> list[tuple[str, Text]]:
    """Turn CacheStats into (label, value) rows for the status table.

    The degraded flag is shown in red when the store runs on its backup
    namespace.
    """
    degraded = (
        Text("yes (backup namespace)", style="red")
        if stats.degraded
        else Text("no", style="green")
    )
    expired_style = "yellow" if stats.expired_count else ""
    return [
        ("Namespace", Text(stats.namespace)),
        ("Degraded", degraded),
        ("Entries", Text(f"{stats.entry_count} / {stats.max_entries}")),
        ("Expired", Text(str(stats.expired_count), style=expired_style)),
        ("Size", Text(format_size(stats.total_size))),
        ("Stale period", Text(format_period(stats.stale_period))),
    ]
