"""Core domain services for pixcache."""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Future
from pathlib import Path

from pixcache.core.cache_maintenance import (
    evict_for_insert,
    expired_keys,
    sweep_expired,
)
from pixcache.core.classifier import classify
from pixcache.core.exceptions import (
    BackendClearError,
    BackendError,
    BackendOpenError,
    BackupBackendOpenError,
    FetchFailedError,
    ResourceNotFoundError,
)
from pixcache.core.models import (
    DEFAULT_MAX_ENTRIES,
    CacheConfig,
    CacheEntry,
    CacheStats,
    Resource,
    ResourceKind,
    StoreState,
    utc_now,
)
from pixcache.core.ports import (
    BackendFactoryPort,
    BackendPort,
    Clock,
    ExecutorPort,
    FetcherPort,
    ProgressReporter,
)


logger = logging.getLogger(__name__)


class CacheStore:
    """Persistent, bounded, time-expiring cache of fetched bytes.

    The backend is opened in the constructor. If the primary namespace
    cannot be opened, the namespace is wiped (best effort) and a backup
    namespace is opened instead, with the default capacity. Callers only
    ever see a READY store; a failure to open the backup propagates as
    BackupBackendOpenError.

    Example:
        >>> store = CacheStore(CacheConfig("avatars"), backends, fetcher)
        >>> data = store.get("https://example.com/a.png")  # fetched
        >>> data = store.get("https://example.com/a.png")  # served from cache
    """

    def __init__(
        self,
        config: CacheConfig,
        backends: BackendFactoryPort,
        fetcher: FetcherPort,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._config = config
        self._backends = backends
        self._fetcher = fetcher
        self._clock = clock
        self._write_lock = threading.RLock()
        self._inflight_lock = threading.Lock()
        self._inflight: dict[str, Future[bytes]] = {}
        self._state = StoreState.FRESH
        self._degraded = False
        self._max_entries = config.max_entries
        self._namespace = config.namespace
        self._backend = self._open_backend()

    @classmethod
    def from_directory(
        cls,
        config: CacheConfig | None = None,
        cache_root: Path | str | None = None,
        fetcher: FetcherPort | None = None,
    ) -> "CacheStore":
        """Create a CacheStore with file-backed storage and an HTTP fetcher.

        Args:
            config: Store configuration (read from the environment if None).
            cache_root: Directory holding namespace directories
                (defaults to default_cache_root()).
            fetcher: Byte-fetcher (defaults to HttpFetcher).

        Returns:
            A ready CacheStore.
        """
        from pixcache.adapters.cache import FileCacheFactory
        from pixcache.adapters.fetcher import HttpFetcher
        from pixcache.config import config_from_env, default_cache_root

        root = Path(cache_root) if cache_root is not None else default_cache_root()
        return cls(
            config=config if config is not None else config_from_env(),
            backends=FileCacheFactory(root),
            fetcher=fetcher if fetcher is not None else HttpFetcher(),
        )

    def _open_backend(self) -> BackendPort:
        """Run the FRESH -> (DEGRADED ->) READY transition."""
        config = self._config
        try:
            backend = self._backends.open(
                config.namespace, config.stale_period, config.max_entries
            )
        except BackendOpenError as e:
            logger.warning(
                "Cache backend '%s' failed to open, falling back to '%s': %s",
                config.namespace,
                config.resolved_backup_namespace,
                e,
            )
            self._state = StoreState.DEGRADED
        else:
            self._state = StoreState.READY
            return backend

        try:
            self._backends.delete_all(config.namespace)
        except BackendClearError as e:
            logger.warning("Could not clear cache namespace '%s': %s", e.namespace, e)

        backup = config.resolved_backup_namespace
        try:
            backend = self._backends.open(
                backup, config.stale_period, DEFAULT_MAX_ENTRIES
            )
        except Exception as e:
            raise BackupBackendOpenError(
                f"Backup cache backend '{backup}' failed to open",
                namespace=backup,
                cause=e,
            ) from e

        self._namespace = backup
        self._max_entries = DEFAULT_MAX_ENTRIES
        self._degraded = True
        self._state = StoreState.READY
        logger.info("Cache recovered using backup namespace '%s'", backup)
        return backend

    @property
    def config(self) -> CacheConfig:
        """The configuration the store was built with."""
        return self._config

    @property
    def state(self) -> StoreState:
        """Lifecycle state; always READY once construction returns."""
        return self._state

    @property
    def degraded(self) -> bool:
        """True if the store runs on the backup namespace."""
        return self._degraded

    @property
    def namespace(self) -> str:
        """The namespace actually in use."""
        return self._namespace

    @property
    def max_entries(self) -> int:
        """Capacity of the active backend."""
        return self._max_entries

    def _lookup(self, locator: str) -> bytes | None:
        """Return the live payload for a locator, ignoring expired entries."""
        found = self._backend.get(locator)
        if found is None:
            logger.debug("Cache miss: %s", locator)
            return None
        payload, fetched_at = found
        entry = CacheEntry(
            key=locator,
            payload=payload,
            fetched_at=fetched_at,
            stale_period=self._config.stale_period,
        )
        if entry.is_expired(self._clock()):
            logger.debug("Cache entry expired: %s", locator)
            return None
        logger.debug("Cache hit: %s", locator)
        return entry.payload

    def contains(self, locator: str) -> bool:
        """Check for a live entry without fetching."""
        return self._lookup(locator) is not None

    def get(self, locator: str, progress: ProgressReporter | None = None) -> bytes:
        """Return the bytes for a locator, fetching on a miss or expiry.

        Concurrent calls for the same missing locator share one fetch. If
        the fetched bytes cannot be stored, the failure is logged and the
        bytes are still returned.

        Args:
            locator: Network locator used as the cache key.
            progress: Optional progress reporter for the download.

        Returns:
            The cached or freshly fetched payload.

        Raises:
            FetchFailedError: If the fetcher fails. Nothing is cached then.
        """
        cached = self._lookup(locator)
        if cached is not None:
            return cached

        with self._inflight_lock:
            pending = self._inflight.get(locator)
            if pending is None:
                future: Future[bytes] = Future()
                self._inflight[locator] = future
        if pending is not None:
            return pending.result()

        try:
            payload = self._lookup(locator)
            if payload is None:
                payload = self._fetch_and_store(locator, progress)
        except Exception as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(payload)
            return payload
        finally:
            if not future.done():
                future.cancel()
            with self._inflight_lock:
                self._inflight.pop(locator, None)

    def _fetch_and_store(
        self, locator: str, progress: ProgressReporter | None
    ) -> bytes:
        logger.info("Fetching %s", locator)
        if progress is None:
            payload = self._fetcher.fetch(locator)
        else:
            callback = progress.start_task(locator, 0)
            try:
                payload = self._fetcher.fetch(locator, callback)
            finally:
                progress.finish_task(locator)

        fetched_at = self._clock()
        try:
            with self._write_lock:
                evict_for_insert(self._backend, self._max_entries, locator)
                self._backend.put(locator, payload, fetched_at)
        except BackendError as e:
            logger.warning(
                "Could not cache %s in '%s': %s", locator, self._namespace, e
            )
        return payload

    def invalidate(self, locator: str) -> bool:
        """Drop the entry for a locator. Returns True if one existed."""
        with self._write_lock:
            return self._backend.delete(locator)

    def clear(self) -> None:
        """Remove every entry in the active namespace.

        Raises:
            BackendClearError: If the backend could not remove its entries.
        """
        with self._write_lock:
            self._backend.clear()
        logger.info("Cleared cache namespace '%s'", self._namespace)

    def sweep_expired(self) -> int:
        """Physically remove expired entries. Returns the number removed."""
        with self._write_lock:
            return sweep_expired(
                self._backend, self._config.stale_period, self._clock()
            )

    def prefetch(
        self,
        locators: Iterable[str],
        executor: ExecutorPort | None = None,
        progress: ProgressReporter | None = None,
    ) -> dict[str, bytes | FetchFailedError]:
        """Warm the cache for many locators.

        Runs sequentially unless an executor is given. Fetch failures are
        collected per locator instead of raised.

        Args:
            locators: Network locators to load.
            executor: Optional executor for parallel fetching.
            progress: Optional progress reporter.

        Returns:
            Dict mapping each locator to its bytes or its FetchFailedError.
        """
        unique = list(dict.fromkeys(locators))
        results: dict[str, bytes | FetchFailedError] = {}

        def fetch_one(locator: str) -> tuple[str, bytes | FetchFailedError]:
            try:
                return locator, self.get(locator, progress=progress)
            except FetchFailedError as e:
                return locator, e

        if executor is None:
            for locator in unique:
                key, outcome = fetch_one(locator)
                results[key] = outcome
            return results

        with executor:
            futures = [executor.submit(fetch_one, locator) for locator in unique]
            for fut in futures:
                pair = fut.result()
                assert isinstance(pair, tuple)
                key, outcome = pair
                results[key] = outcome

        return results

    def stats(self) -> CacheStats:
        """Summarize the active namespace."""
        entries = self._backend.entries()
        expired = expired_keys(entries, self._config.stale_period, self._clock())
        return CacheStats(
            namespace=self._namespace,
            degraded=self._degraded,
            entry_count=len(entries),
            expired_count=len(expired),
            total_size=sum(e.size for e in entries),
            max_entries=self._max_entries,
            stale_period=self._config.stale_period,
        )


class ResourceResolver:
    """Classifies locators and hands back their bytes.

    Network images go through the CacheStore. Local files are read as
    given. Bundled assets are read relative to ``asset_root``.
    """

    def __init__(self, cache: CacheStore, asset_root: Path | None = None) -> None:
        self._cache = cache
        self._asset_root = asset_root

    def _asset_path(self, locator: str) -> Path:
        if self._asset_root is None:
            return Path(locator)
        return self._asset_root / locator

    def resolve(
        self, locator: str | None, progress: ProgressReporter | None = None
    ) -> Resource:
        """Classify a locator and load its bytes.

        Args:
            locator: URL or path, or None.
            progress: Optional progress reporter for network downloads.

        Returns:
            Resource with kind and data (data is None for UNKNOWN).

        Raises:
            FetchFailedError: If a network image cannot be fetched.
            ResourceNotFoundError: If a local file or asset is missing.
        """
        kind = classify(locator)
        if locator is None or kind is ResourceKind.UNKNOWN:
            return Resource(locator=locator, kind=ResourceKind.UNKNOWN)

        if kind is ResourceKind.NETWORK_IMAGE:
            return Resource(locator, kind, self._cache.get(locator, progress))

        path = self._asset_path(locator) if kind.is_asset else Path(locator)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise ResourceNotFoundError(
                f"Resource not found: {path}",
                locator=locator,
                cause=e,
            ) from e
        return Resource(locator, kind, data)
