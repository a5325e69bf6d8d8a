"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from concurrent.futures import Future
    from datetime import datetime, timedelta

    from pixcache.core.models import EntryInfo

ProgressCallback = Callable[[int, int], None]
Clock = Callable[[], "datetime"]


@runtime_checkable
class FetcherPort(Protocol):
    """Byte-fetcher for network locators (an HTTP client)."""

    def fetch(self, locator: str, progress: ProgressCallback | None = None) -> bytes:
        """Retrieve the bytes behind a locator.

        Args:
            locator: URL to fetch.
            progress: Optional callback function(bytes_read, total_bytes).

        Returns:
            The full response body.

        Raises:
            FetchFailedError: On network errors, timeouts or non-success status.
        """
        ...


@runtime_checkable
class BackendPort(Protocol):
    """Keyed blob storage for a single opened namespace."""

    def get(self, key: str) -> tuple[bytes, datetime] | None:
        """Return (payload, fetched_at) for a key, or None if absent."""
        ...

    def put(self, key: str, payload: bytes, fetched_at: datetime) -> None:
        """Store a payload, replacing any previous one for the key."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        ...

    def entries(self) -> list[EntryInfo]:
        """List metadata for every stored key."""
        ...

    def clear(self) -> None:
        """Remove every key in the namespace.

        Raises:
            BackendClearError: If entries could not be removed.
        """
        ...


@runtime_checkable
class BackendFactoryPort(Protocol):
    """Opens backends by namespace and wipes namespaces."""

    def open(
        self, namespace: str, stale_period: timedelta, max_entries: int
    ) -> BackendPort:
        """Open (or create) the backend for a namespace.

        Raises:
            BackendOpenError: If the stored data is corrupt or unreadable.
        """
        ...

    def delete_all(self, namespace: str) -> None:
        """Delete everything stored under a namespace, without opening it.

        Raises:
            BackendClearError: If the namespace could not be removed.
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports download progress to the user.

    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a download task and return its callback."""
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete."""
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output."""

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _read, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor used by CacheStore.prefetch().

    Abstracts over concurrent.futures executors so the core never
    creates threads itself.
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution."""
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
