"""Cache maintenance operations for CacheStore.

Eviction, sweeping and statistics work on entry metadata only, so they
never load payloads. Callers hold the store's write lock.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from datetime import datetime, timedelta

    from pixcache.core.models import EntryInfo
    from pixcache.core.ports import BackendPort

logger = logging.getLogger(__name__)


def select_evictions(
    entries: list[EntryInfo],
    max_entries: int,
    incoming_key: str,
) -> list[str]:
    """Pick the keys to drop so that inserting ``incoming_key`` fits.

    Oldest ``fetched_at`` goes first. Replacing an existing key does not
    grow the store, so it never causes an eviction on its own.

    Args:
        entries: Current backend entries.
        max_entries: Capacity of the store.
        incoming_key: Key about to be written.

    Returns:
        Keys to delete, oldest first.
    """
    others = [e for e in entries if e.key != incoming_key]
    overflow = len(others) + 1 - max_entries
    if overflow <= 0:
        return []
    oldest_first = sorted(others, key=lambda e: (e.fetched_at, e.key))
    return [e.key for e in oldest_first[:overflow]]


def evict_for_insert(backend: BackendPort, max_entries: int, incoming_key: str) -> int:
    """Delete least-recently-fetched entries to make room for one insert.

    Returns:
        Number of entries evicted.
    """
    victims = select_evictions(backend.entries(), max_entries, incoming_key)
    for key in victims:
        backend.delete(key)
        logger.debug("Evicted %s", key)
    return len(victims)


def expired_keys(
    entries: list[EntryInfo], stale_period: timedelta, now: datetime
) -> list[str]:
    """Keys whose ``fetched_at + stale_period`` is at or before ``now``."""
    return [e.key for e in entries if now >= e.fetched_at + stale_period]


def sweep_expired(backend: BackendPort, stale_period: timedelta, now: datetime) -> int:
    """Physically remove expired entries.

    Returns:
        Number of entries removed.
    """
    removed = 0
    for key in expired_keys(backend.entries(), stale_period, now):
        if backend.delete(key):
            removed += 1
    if removed:
        logger.info("Swept %d expired entries", removed)
    return removed
