"""Core domain models for pixcache.

These models are pure Python dataclasses with no I/O dependencies.
They describe locators, cached entries, and the cache configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum


DEFAULT_NAMESPACE = "pixcache"
DEFAULT_STALE_PERIOD = timedelta(days=7)
DEFAULT_MAX_ENTRIES = 1000
BACKUP_SUFFIX = "_backup"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class ResourceKind(str, Enum):
    """Classification tag for a locator."""

    VECTOR_GRAPHIC = "vector-graphic"
    RASTER_ASSET = "raster-asset"
    NETWORK_IMAGE = "network-image"
    LOCAL_FILE = "local-file"
    ANIMATION = "animation"
    UNKNOWN = "unknown"

    @property
    def is_asset(self) -> bool:
        """True for kinds that live in the bundled asset tree."""
        return self in (
            ResourceKind.RASTER_ASSET,
            ResourceKind.VECTOR_GRAPHIC,
            ResourceKind.ANIMATION,
        )


class StoreState(str, Enum):
    """Lifecycle state of a CacheStore."""

    FRESH = "fresh"
    DEGRADED = "degraded"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Configuration for a CacheStore.

    Attributes:
        namespace: Identifier for the primary backend (one store per namespace).
        stale_period: How long a fetched entry stays live.
        max_entries: Maximum number of entries kept in the primary backend.
        backup_namespace: Namespace used when the primary backend cannot be
            opened. Defaults to ``namespace + "_backup"``.

    Example:
        >>> config = CacheConfig(namespace="avatars")
        >>> config.resolved_backup_namespace
        'avatars_backup'
    """

    namespace: str = DEFAULT_NAMESPACE
    stale_period: timedelta = DEFAULT_STALE_PERIOD
    max_entries: int = DEFAULT_MAX_ENTRIES
    backup_namespace: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.namespace:
            raise ValueError("Cache namespace cannot be empty")
        if self.max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if self.stale_period <= timedelta(0):
            raise ValueError("stale_period must be positive")
        if self.backup_namespace is not None and (
            not self.backup_namespace or self.backup_namespace == self.namespace
        ):
            raise ValueError(
                "backup_namespace must be non-empty and differ from namespace"
            )

    @property
    def resolved_backup_namespace(self) -> str:
        """Backup namespace, derived from the primary one when not set."""
        if self.backup_namespace is not None:
            return self.backup_namespace
        return f"{self.namespace}{BACKUP_SUFFIX}"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached network resource.

    Attributes:
        key: The locator the payload was fetched from.
        payload: Raw bytes as returned by the fetcher.
        fetched_at: Time of the last successful fetch (UTC).
        stale_period: Lifetime of the entry, taken from the store config.
    """

    key: str
    payload: bytes
    fetched_at: datetime
    stale_period: timedelta = DEFAULT_STALE_PERIOD

    @property
    def expires_at(self) -> datetime:
        """Moment after which the entry no longer counts as cached."""
        return self.fetched_at + self.stale_period

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry is past its expiry at ``now``."""
        return now >= self.expires_at


@dataclass(frozen=True, slots=True)
class EntryInfo:
    """Entry metadata listed by a backend without loading payloads."""

    key: str
    fetched_at: datetime
    size: int = 0


@dataclass(frozen=True, slots=True)
class Resource:
    """A classified locator together with its bytes.

    ``data`` is None only for ``ResourceKind.UNKNOWN``; decoders receive
    the bytes and the kind and do the rest.
    """

    locator: str | None
    kind: ResourceKind
    data: bytes | None = None


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of a CacheStore's contents."""

    namespace: str
    degraded: bool
    entry_count: int
    expired_count: int
    total_size: int
    max_entries: int
    stale_period: timedelta
