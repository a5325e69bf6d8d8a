"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
in-memory fakes for the cache ports.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from pixcache.core.exceptions import (
    BackendClearError,
    BackendOpenError,
    FetchFailedError,
)
from pixcache.core.models import EntryInfo
from pixcache.core.ports import ProgressCallback


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, classifier and services")
    config.addinivalue_line("markers", "cache: Cache store and backends")
    config.addinivalue_line("markers", "fetcher: HTTP fetcher adapter")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow)",
    )


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class CountingFetcher:
    """Fetcher that returns canned bytes and counts calls per locator."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.calls: dict[str, int] = {}
        self.failing = failing or set()
        self._lock = threading.Lock()

    def fetch(self, locator: str, progress: ProgressCallback | None = None) -> bytes:
        with self._lock:
            self.calls[locator] = self.calls.get(locator, 0) + 1
            version = self.calls[locator]
        if locator in self.failing:
            raise FetchFailedError(
                f"GET {locator} returned 404", locator=locator, status_code=404
            )
        payload = f"{locator}#{version}".encode()
        if progress is not None:
            progress(len(payload), len(payload))
        return payload

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


class InMemoryBackend:
    """BackendPort keeping payloads in a dict."""

    def __init__(self, namespace: str, max_entries: int) -> None:
        self.namespace = namespace
        self.max_entries = max_entries
        self.data: dict[str, tuple[bytes, datetime]] = {}

    def get(self, key: str) -> tuple[bytes, datetime] | None:
        return self.data.get(key)

    def put(self, key: str, payload: bytes, fetched_at: datetime) -> None:
        self.data[key] = (payload, fetched_at)

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    def entries(self) -> list[EntryInfo]:
        return [
            EntryInfo(key=k, fetched_at=ts, size=len(p))
            for k, (p, ts) in self.data.items()
        ]

    def clear(self) -> None:
        self.data.clear()


class InMemoryBackendFactory:
    """BackendFactoryPort with switchable failures.

    Attributes:
        fail_open: Namespaces whose open() raises BackendOpenError.
        fail_clear: If True, delete_all() raises BackendClearError.
        opened: (namespace, max_entries) for every successful open.
        deleted: Namespaces passed to delete_all().
    """

    def __init__(
        self,
        fail_open: set[str] | None = None,
        fail_clear: bool = False,
        open_error: Exception | None = None,
    ) -> None:
        self.fail_open = fail_open or set()
        self.fail_clear = fail_clear
        self.open_error = open_error
        self.opened: list[tuple[str, int]] = []
        self.deleted: list[str] = []
        self.backends: dict[str, InMemoryBackend] = {}

    def open(
        self, namespace: str, stale_period: timedelta, max_entries: int
    ) -> InMemoryBackend:
        if namespace in self.fail_open:
            raise self.open_error or BackendOpenError(
                f"Corrupt index in '{namespace}'", namespace=namespace
            )
        self.opened.append((namespace, max_entries))
        backend = self.backends.setdefault(
            namespace, InMemoryBackend(namespace, max_entries)
        )
        return backend

    def delete_all(self, namespace: str) -> None:
        self.deleted.append(namespace)
        if self.fail_clear:
            raise BackendClearError("Permission denied", namespace=namespace)
        self.backends.pop(namespace, None)


@pytest.fixture
def clock() -> ManualClock:
    """Manually advanced UTC clock."""
    return ManualClock()


@pytest.fixture
def fetcher() -> CountingFetcher:
    """Fetcher spy that records call counts."""
    return CountingFetcher()


@pytest.fixture
def backends() -> InMemoryBackendFactory:
    """In-memory backend factory that opens every namespace."""
    return InMemoryBackendFactory()
