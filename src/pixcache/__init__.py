"""pixcache - locator classification and a self-healing image cache.

This library decides what kind of resource a path or URL identifies and
hands back its bytes. Network images go through a persistent, bounded,
time-expiring cache that recovers on its own from a corrupt store.

Example:
    >>> from pathlib import Path
    >>> from pixcache import CacheStore, ResourceResolver, classify
    >>> classify("assets/icons/icon.svg").value
    'vector-graphic'
    >>> store = CacheStore.from_directory(cache_root="./.cache")
    >>> resolver = ResourceResolver(store, asset_root=Path("./assets"))
    >>> resource = resolver.resolve("https://example.com/logo.png")
"""

from pixcache.adapters.cache import FileCacheBackend, FileCacheFactory
from pixcache.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from pixcache.adapters.fetcher import HttpFetcher
from pixcache.config import config_from_env, default_cache_root
from pixcache.core.classifier import classify, is_network
from pixcache.core.exceptions import (
    BackendClearError,
    BackendError,
    BackendOpenError,
    BackupBackendOpenError,
    CacheCorruptError,
    ConfigurationError,
    FetchFailedError,
    PixcacheError,
    ResourceNotFoundError,
)
from pixcache.core.models import (
    CacheConfig,
    CacheEntry,
    CacheStats,
    EntryInfo,
    Resource,
    ResourceKind,
    StoreState,
)
from pixcache.core.ports import (
    BackendFactoryPort,
    BackendPort,
    FetcherPort,
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
)
from pixcache.core.services import CacheStore, ResourceResolver
from pixcache.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "BackendClearError",
    "BackendError",
    "BackendFactoryPort",
    "BackendOpenError",
    "BackendPort",
    "BackupBackendOpenError",
    "CacheConfig",
    "CacheCorruptError",
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "ConfigurationError",
    "EntryInfo",
    "FetchFailedError",
    "FetcherPort",
    "FileCacheBackend",
    "FileCacheFactory",
    "HttpFetcher",
    "NullProgressReporter",
    "PixcacheError",
    "ProgressCallback",
    "ProgressReporter",
    "Resource",
    "ResourceKind",
    "ResourceNotFoundError",
    "RichProgressReporter",
    "StoreState",
    "SynchronousExecutor",
    "ThreadPoolExecutorAdapter",
    "__version__",
    "classify",
    "config_from_env",
    "default_cache_root",
    "is_network",
]
