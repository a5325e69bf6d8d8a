"""Byte-fetcher adapters."""

from pixcache.adapters.fetcher.http import HttpFetcher


__all__ = ["HttpFetcher"]
