"""Cache backend adapters."""

from pixcache.adapters.cache.file_cache import FileCacheBackend, FileCacheFactory


__all__ = ["FileCacheBackend", "FileCacheFactory"]
