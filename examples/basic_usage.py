"""Basic classify-and-resolve example.

This example shows the simplest usage pattern: classify a few locators,
build a cache store on disk, and resolve a network image. The second
resolve is served from the cache without touching the network.
"""

from pathlib import Path

from pixcache import CacheConfig, CacheStore, ResourceResolver, classify


for locator in [
    "https://example.com/banner.png",
    "/data/user/0/photo.jpg",
    "assets/icons/menu.svg",
    "assets/animations/loading.json",
    "assets/images/logo.png",
]:
    print(f"{locator:40} {classify(locator).value}")

# Option 1: Explicit configuration (full control over namespace and limits)
store = CacheStore.from_directory(
    config=CacheConfig("banners", max_entries=200),
    cache_root="./.pixcache",
)

# Option 2: Environment-driven configuration
# Reads PIXCACHE_NAMESPACE, PIXCACHE_STALE_DAYS, PIXCACHE_MAX_ENTRIES and
# stores under $PIXCACHE_CACHE_DIR (or ~/.cache/pixcache)
# store = CacheStore.from_directory()

resolver = ResourceResolver(store, asset_root=Path("./assets"))

# First resolve downloads and stores the bytes
resource = resolver.resolve("https://example.com/banner.png")
print(f"{resource.kind.value}: {len(resource.data or b'')} bytes")

# Within the stale period (7 days by default) the cache answers
resource = resolver.resolve("https://example.com/banner.png")
