"""Configuration utilities for pixcache.

Settings come from keyword arguments first, then environment variables:

    PIXCACHE_CACHE_DIR          Root directory for namespace directories
    PIXCACHE_NAMESPACE          Primary cache namespace
    PIXCACHE_BACKUP_NAMESPACE   Namespace used after a failed open
    PIXCACHE_STALE_DAYS         Stale period in days (may be fractional)
    PIXCACHE_MAX_ENTRIES        Maximum cached entries
"""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path

from pixcache.core.exceptions import ConfigurationError
from pixcache.core.models import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_NAMESPACE,
    DEFAULT_STALE_PERIOD,
    CacheConfig,
)


ENV_CACHE_DIR = "PIXCACHE_CACHE_DIR"
ENV_NAMESPACE = "PIXCACHE_NAMESPACE"
ENV_BACKUP_NAMESPACE = "PIXCACHE_BACKUP_NAMESPACE"
ENV_STALE_DAYS = "PIXCACHE_STALE_DAYS"
ENV_MAX_ENTRIES = "PIXCACHE_MAX_ENTRIES"


def default_cache_root() -> Path:
    """Return the directory that holds cache namespaces.

    Uses ``$PIXCACHE_CACHE_DIR`` when set, otherwise ``~/.cache/pixcache``.

    Example:
        >>> from pixcache.config import default_cache_root
        >>> root = default_cache_root()
    """
    env = os.environ.get(ENV_CACHE_DIR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".cache" / "pixcache"


def _env_number(name: str, kind: type[int] | type[float]) -> int | float | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def config_from_env(namespace: str | None = None) -> CacheConfig:
    """Build a CacheConfig from environment variables.

    Args:
        namespace: Explicit namespace, overriding ``$PIXCACHE_NAMESPACE``.

    Returns:
        CacheConfig with defaults for anything not set.

    Raises:
        ConfigurationError: If a numeric variable is malformed or the
            resulting configuration is invalid.
    """
    stale_days = _env_number(ENV_STALE_DAYS, float)
    max_entries = _env_number(ENV_MAX_ENTRIES, int)
    try:
        return CacheConfig(
            namespace=namespace or os.environ.get(ENV_NAMESPACE) or DEFAULT_NAMESPACE,
            stale_period=(
                timedelta(days=stale_days)
                if stale_days is not None
                else DEFAULT_STALE_PERIOD
            ),
            max_entries=(
                int(max_entries) if max_entries is not None else DEFAULT_MAX_ENTRIES
            ),
            backup_namespace=os.environ.get(ENV_BACKUP_NAMESPACE) or None,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
