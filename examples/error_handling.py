"""Error handling patterns with recovery hints.

This example demonstrates how to handle the errors a resolver can raise
and use the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from pixcache import (
    CacheStore,
    FetchFailedError,
    PixcacheError,
    Resource,
    ResourceNotFoundError,
    ResourceResolver,
)


store = CacheStore.from_directory(cache_root="./.pixcache")
resolver = ResourceResolver(store, asset_root=Path("./assets"))


# Pattern 1: Handle download failures
def resolve_or_placeholder(locator: str) -> Resource | None:
    """Resolve a network image, returning None if it cannot be downloaded."""
    try:
        return resolver.resolve(locator)
    except FetchFailedError as e:
        # Nothing was cached, so a later call retries the download
        print(f"Download failed: {e.locator}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 2: Handle missing bundled assets
def resolve_asset(locator: str) -> Resource | None:
    """Resolve an asset, reporting which path was tried."""
    try:
        return resolver.resolve(locator)
    except ResourceNotFoundError as e:
        print(f"Missing asset: {e.locator}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: Report a degraded cache
# A corrupt cache directory is wiped and replaced by a backup namespace
# at construction time; callers can surface that to users.
if store.degraded:
    print(f"Cache was rebuilt; now using '{store.namespace}'")


# Pattern 4: Catch-all for any library error
def resolve_safe(locator: str) -> Resource | None:
    """Resolve any locator with comprehensive error handling."""
    try:
        return resolver.resolve(locator)
    except PixcacheError as e:
        print(f"Could not load {locator}: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None


# Example usage
if __name__ == "__main__":
    resolve_or_placeholder("https://example.invalid/missing.png")
    resolve_asset("images/not-bundled.png")
