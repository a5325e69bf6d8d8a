"""Tests for the CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pixcache.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "PIXCACHE_CACHE_DIR",
        "PIXCACHE_NAMESPACE",
        "PIXCACHE_BACKUP_NAMESPACE",
        "PIXCACHE_STALE_DAYS",
        "PIXCACHE_MAX_ENTRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> dict[str, int]:
    """Replace HttpFetcher.fetch with an offline fake; returns call counts."""
    from pixcache.adapters.fetcher import HttpFetcher
    from pixcache.core.exceptions import FetchFailedError

    calls: dict[str, int] = {}

    def fake_fetch(self, locator, progress=None):
        calls[locator] = calls.get(locator, 0) + 1
        if "missing" in locator:
            raise FetchFailedError(
                f"GET {locator} returned 404", locator=locator, status_code=404
            )
        return b"remote-bytes"

    monkeypatch.setattr(HttpFetcher, "fetch", fake_fetch)
    return calls


def cli(cache_dir: Path, *args: str):
    return runner.invoke(app, ["--cache-dir", str(cache_dir), *args])


@pytest.mark.cli
@pytest.mark.tier(1)
class TestClassify:
    """Tests for classify and kinds commands."""

    def test_classify_prints_kinds(self) -> None:
        result = runner.invoke(
            app,
            [
                "classify",
                "https://a.com/b.svg",
                "assets/x.json",
                "/data/p.jpg",
                "logo.png",
            ],
        )

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "https://a.com/b.svg\tnetwork-image",
            "assets/x.json\tanimation",
            "/data/p.jpg\tlocal-file",
            "logo.png\traster-asset",
        ]

    def test_kinds_renders_table(self) -> None:
        result = runner.invoke(app, ["kinds", "assets/icons/icon.svg"])

        assert result.exit_code == 0, result.output
        assert "vector-graphic" in result.output


@pytest.mark.cli
@pytest.mark.tra("UseCase.Fetch")
@pytest.mark.tier(1)
class TestFetch:
    """Tests for the fetch command."""

    def test_fetch_asset_to_output(self, tmp_path: Path) -> None:
        assets = tmp_path / "assets"
        assets.mkdir()
        (assets / "logo.png").write_bytes(b"\x89PNG")
        out = tmp_path / "out" / "logo.png"

        result = cli(
            tmp_path / "cache",
            "fetch",
            "logo.png",
            "--asset-root",
            str(assets),
            "--output",
            str(out),
        )

        assert result.exit_code == 0, result.output
        assert out.read_bytes() == b"\x89PNG"
        assert "raster-asset" in result.output

    def test_fetch_network_is_cached_on_disk(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        """A second CLI run reads the payload from the file cache."""
        url = "https://example.com/image.png"

        first = cli(tmp_path / "cache", "fetch", url)
        second = cli(tmp_path / "cache", "fetch", url)

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert "network-image" in second.output
        assert fake_http == {url: 1}

    def test_fetch_failure_exits_with_hint(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        result = cli(tmp_path / "cache", "fetch", "https://example.com/missing.png")

        assert result.exit_code == 1
        assert "Hint:" in result.output
        assert "404" in result.output

    def test_fetch_missing_asset_exits(self, tmp_path: Path) -> None:
        result = cli(
            tmp_path / "cache", "fetch", "nope.png", "--asset-root", str(tmp_path)
        )

        assert result.exit_code == 1
        assert "not found" in result.output.lower()


@pytest.mark.cli
@pytest.mark.tra("UseCase.Prefetch")
@pytest.mark.tier(1)
class TestPrefetch:
    """Tests for the prefetch command."""

    def test_prefetch_caches_and_skips_non_network(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        result = cli(
            tmp_path / "cache",
            "prefetch",
            "https://example.com/a.png",
            "https://example.com/b.png",
            "assets/logo.png",
        )

        assert result.exit_code == 0, result.output
        assert "Skipping assets/logo.png" in result.output
        assert "https://example.com/a.png: cached" in result.output
        assert set(fake_http) == {
            "https://example.com/a.png",
            "https://example.com/b.png",
        }

    def test_prefetch_failure_exits_1(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        result = cli(
            tmp_path / "cache",
            "prefetch",
            "--workers",
            "1",
            "https://example.com/missing.png",
        )

        assert result.exit_code == 1
        assert "failed" in result.output


@pytest.mark.cli
@pytest.mark.tra("UseCase.Maintenance")
@pytest.mark.tier(1)
class TestMaintenanceCommands:
    """Tests for status, sweep and clear."""

    def test_status_shows_namespace_and_entries(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        cli(tmp_path / "cache", "fetch", "https://example.com/a.png")

        result = cli(tmp_path / "cache", "--namespace", "imgs", "status")
        default = cli(tmp_path / "cache", "status")

        assert result.exit_code == 0, result.output
        assert "imgs" in result.output
        assert "0 / 1000" in result.output
        assert "1 / 1000" in default.output

    def test_status_reports_degraded_store(self, tmp_path: Path) -> None:
        """A corrupt index is recovered and reported, not crashed on."""
        ns_dir = tmp_path / "cache" / "pixcache"
        ns_dir.mkdir(parents=True)
        (ns_dir / "index.json").write_text("{corrupt")

        result = cli(tmp_path / "cache", "status")

        assert result.exit_code == 0, result.output
        assert "pixcache_backup" in result.output
        assert "yes" in result.output

    def test_clear_empties_cache(
        self, tmp_path: Path, fake_http: dict[str, int]
    ) -> None:
        cli(tmp_path / "cache", "fetch", "https://example.com/a.png")

        result = cli(tmp_path / "cache", "clear")
        cli(tmp_path / "cache", "fetch", "https://example.com/a.png")

        assert result.exit_code == 0, result.output
        assert "Cleared" in result.output
        assert fake_http["https://example.com/a.png"] == 2

    def test_sweep_reports_count(self, tmp_path: Path) -> None:
        result = cli(tmp_path / "cache", "sweep")

        assert result.exit_code == 0, result.output
        assert "Removed 0 expired entries." in result.output

    def test_invalid_env_config_exits(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PIXCACHE_MAX_ENTRIES", "many")

        result = cli(tmp_path / "cache", "status")

        assert result.exit_code == 1
        assert "PIXCACHE_MAX_ENTRIES" in result.output
