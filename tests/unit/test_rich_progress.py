"""Unit tests for RichProgressReporter adapter."""

import io

import pytest
from rich.console import Console


def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.mark.progress
@pytest.mark.tier(1)
class TestRichProgressReporter:
    """Tests for RichProgressReporter."""

    def test_satisfies_protocol(self) -> None:
        from pixcache.core.ports import ProgressReporter
        from pixcache.progress import RichProgressReporter

        assert isinstance(RichProgressReporter(quiet_console()), ProgressReporter)

    def test_callback_accepts_unknown_total(self) -> None:
        """A total of 0 means the size is not known yet."""
        from pixcache.progress import RichProgressReporter

        with RichProgressReporter(quiet_console()) as reporter:
            callback = reporter.start_task("https://x/a.png", 0)
            callback(100, 0)
            callback(200, 400)
            reporter.finish_task("https://x/a.png")

    def test_finish_unknown_task_is_noop(self) -> None:
        from pixcache.progress import RichProgressReporter

        with RichProgressReporter(quiet_console()) as reporter:
            reporter.finish_task("never-started")

    def test_multiple_concurrent_tasks(self) -> None:
        from pixcache.progress import RichProgressReporter

        with RichProgressReporter(quiet_console()) as reporter:
            cb1 = reporter.start_task("https://x/a.png", 10)
            cb2 = reporter.start_task("https://x/b.png", 20)
            cb1(10, 10)
            cb2(5, 20)
            reporter.finish_task("https://x/a.png")
            reporter.finish_task("https://x/b.png")

    def test_used_by_cache_store(self, backends, fetcher) -> None:
        """CacheStore.get() drives the reporter during a fetch."""
        from pixcache.core.models import CacheConfig
        from pixcache.core.services import CacheStore
        from pixcache.progress import RichProgressReporter

        store = CacheStore(CacheConfig("imgs"), backends, fetcher)
        with RichProgressReporter(quiet_console()) as reporter:
            data = store.get("https://x/a.png", progress=reporter)

        assert data == b"https://x/a.png#1"
