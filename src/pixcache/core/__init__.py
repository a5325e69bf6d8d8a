"""Core domain module for pixcache.

This module contains the classifier, domain models and port definitions.
It has no I/O dependencies and can be tested in isolation.
"""

from pixcache.core.classifier import classify, is_network
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
    ProgressCallback,
)


__all__ = [
    "BackendFactoryPort",
    "BackendPort",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "EntryInfo",
    "FetcherPort",
    "ProgressCallback",
    "Resource",
    "ResourceKind",
    "StoreState",
    "classify",
    "is_network",
]
