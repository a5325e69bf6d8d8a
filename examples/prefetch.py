"""Parallel prefetch example.

This example shows how to warm the cache for a gallery of images using
prefetch(), which downloads in parallel with progress bars. Failures are
returned per locator instead of aborting the batch.
"""

from pixcache import (
    CacheStore,
    FetchFailedError,
    RichProgressReporter,
    ThreadPoolExecutorAdapter,
)


gallery = [
    "https://example.com/gallery/1.jpg",
    "https://example.com/gallery/2.jpg",
    "https://example.com/gallery/3.jpg",
    "https://example.com/gallery/1.jpg",  # duplicates are fetched once
]

store = CacheStore.from_directory(cache_root="./.pixcache")

with RichProgressReporter() as progress:
    results = store.prefetch(
        gallery,
        executor=ThreadPoolExecutorAdapter(max_workers=4),
        progress=progress,
    )

for locator, outcome in results.items():
    if isinstance(outcome, FetchFailedError):
        print(f"{locator}: failed ({outcome.recovery_hint})")
    else:
        print(f"{locator}: {len(outcome)} bytes")

# Without an executor, prefetch runs one download at a time
results = store.prefetch(gallery)
