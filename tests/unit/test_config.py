"""Unit tests for environment configuration."""

from datetime import timedelta
from pathlib import Path

import pytest


ENV_VARS = [
    "PIXCACHE_CACHE_DIR",
    "PIXCACHE_NAMESPACE",
    "PIXCACHE_BACKUP_NAMESPACE",
    "PIXCACHE_STALE_DAYS",
    "PIXCACHE_MAX_ENTRIES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.core
@pytest.mark.tier(0)
class TestDefaultCacheRoot:
    """Tests for default_cache_root()."""

    def test_uses_env_when_set(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from pixcache.config import default_cache_root

        monkeypatch.setenv("PIXCACHE_CACHE_DIR", str(tmp_path))
        assert default_cache_root() == tmp_path

    def test_defaults_to_home_cache(self) -> None:
        from pixcache.config import default_cache_root

        assert default_cache_root() == Path.home() / ".cache" / "pixcache"


@pytest.mark.core
@pytest.mark.tier(0)
class TestConfigFromEnv:
    """Tests for config_from_env()."""

    def test_defaults(self) -> None:
        from pixcache.config import config_from_env

        config = config_from_env()
        assert config.namespace == "pixcache"
        assert config.stale_period == timedelta(days=7)
        assert config.max_entries == 1000
        assert config.backup_namespace is None

    def test_reads_all_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from pixcache.config import config_from_env

        monkeypatch.setenv("PIXCACHE_NAMESPACE", "avatars")
        monkeypatch.setenv("PIXCACHE_BACKUP_NAMESPACE", "avatars_spare")
        monkeypatch.setenv("PIXCACHE_STALE_DAYS", "1.5")
        monkeypatch.setenv("PIXCACHE_MAX_ENTRIES", "20")

        config = config_from_env()

        assert config.namespace == "avatars"
        assert config.resolved_backup_namespace == "avatars_spare"
        assert config.stale_period == timedelta(days=1.5)
        assert config.max_entries == 20

    def test_explicit_namespace_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from pixcache.config import config_from_env

        monkeypatch.setenv("PIXCACHE_NAMESPACE", "avatars")
        assert config_from_env(namespace="banners").namespace == "banners"

    def test_malformed_number_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from pixcache.config import config_from_env
        from pixcache.core.exceptions import ConfigurationError

        monkeypatch.setenv("PIXCACHE_MAX_ENTRIES", "lots")
        with pytest.raises(ConfigurationError, match="PIXCACHE_MAX_ENTRIES"):
            config_from_env()

    def test_invalid_value_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from pixcache.config import config_from_env
        from pixcache.core.exceptions import ConfigurationError

        monkeypatch.setenv("PIXCACHE_MAX_ENTRIES", "0")
        with pytest.raises(ConfigurationError, match="max_entries"):
            config_from_env()
