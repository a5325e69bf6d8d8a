"""Formatting utilities for domain values."""

from datetime import timedelta

from pixcache.core.models import ResourceKind


def kind_to_color(kind: ResourceKind) -> str:
    """Map a ResourceKind to a Rich color name.

    Args:
        kind: Classification result.

    Returns:
        Color name, or an empty string for UNKNOWN.
    """
    color_map = {
        ResourceKind.NETWORK_IMAGE: "cyan",
        ResourceKind.VECTOR_GRAPHIC: "magenta",
        ResourceKind.ANIMATION: "yellow",
        ResourceKind.LOCAL_FILE: "green",
        ResourceKind.RASTER_ASSET: "blue",
    }
    return color_map.get(kind, "")


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"


def format_period(period: timedelta) -> str:
    """Format a stale period as days, hours or seconds."""
    seconds = int(period.total_seconds())
    if seconds % 86400 == 0:
        days = seconds // 86400
        return f"{days} day" if days == 1 else f"{days} days"
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    return f"{seconds}s"
