"""Tests for configuration and environment lookups."""

import platform
from pathlib import Path

import pytest

from usagestats.core.environment import (
    UNKNOWN_VERSION,
    AppEnvironment,
    current_environment,
    get_app_version,
    get_os_version,
)
from usagestats.core.settings import (
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT_SECONDS,
    ReporterSettings,
    is_dev_mode,
)
from usagestats.reporter.stats_store import open_stats_store


class TestDevMode:
    """Dev/test flag detection."""

    @pytest.mark.parametrize(
        "environ",
        [
            {"USAGESTATS_DEV": "1"},
            {"USAGESTATS_DEV": "true"},
            {"USAGESTATS_TEST_ENV": "YES"},
            {"USAGESTATS_TEST_ENV": " on "},
        ],
    )
    def test_truthy_values(self, environ):
        """Either variable with a truthy value enables dev mode."""
        assert is_dev_mode(environ)

    @pytest.mark.parametrize(
        "environ",
        [{}, {"USAGESTATS_DEV": "0"}, {"USAGESTATS_DEV": ""}, {"USAGESTATS_TEST_ENV": "false"}],
    )
    def test_falsy_values(self, environ):
        """Unset or falsy values leave reporting enabled."""
        assert not is_dev_mode(environ)


class TestReporterSettings:
    """Settings from environment variables."""

    def test_defaults(self):
        """An empty environment gives the defaults."""
        settings = ReporterSettings.from_env({})

        assert settings.endpoint == DEFAULT_ENDPOINT
        assert settings.dev_mode is False
        assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert settings.reset_counters_on_report is False

    def test_overrides(self, tmp_path: Path):
        """Every setting can be overridden."""
        settings = ReporterSettings.from_env(
            {
                "USAGESTATS_ENDPOINT": "https://collector.test/usage",
                "USAGESTATS_DB_PATH": str(tmp_path / "s.db"),
                "USAGESTATS_STORAGE_PATH": str(tmp_path / "ls.json"),
                "USAGESTATS_TIMEOUT": "2.5",
                "USAGESTATS_RESET_COUNTERS": "1",
                "USAGESTATS_TEST_ENV": "1",
            }
        )

        assert settings.endpoint == "https://collector.test/usage"
        assert settings.db_path == tmp_path / "s.db"
        assert settings.storage_path == tmp_path / "ls.json"
        assert settings.timeout_seconds == 2.5
        assert settings.reset_counters_on_report is True
        assert settings.dev_mode is True

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_bad_timeout_uses_default(self, raw):
        """Invalid timeouts fall back to the default."""
        settings = ReporterSettings.from_env({"USAGESTATS_TIMEOUT": raw})
        assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS


class TestEnvironment:
    """Version lookups."""

    def test_unknown_distribution(self):
        """An uninstalled distribution reports the placeholder version."""
        assert get_app_version("no-such-distribution-usagestats-test") == UNKNOWN_VERSION

    def test_os_version(self):
        """OS version is the platform release string."""
        assert get_os_version() == platform.release()

    def test_current_environment_override(self):
        """The host can supply its own app version."""
        env = current_environment(app_version="4.5.6")
        assert env == AppEnvironment(app_version="4.5.6", os_version=platform.release())


class TestOpenStatsStore:
    """Wiring a store from settings."""

    def test_file_backed_store(self, tmp_path: Path):
        """The store records to the configured database and storage file."""
        settings = ReporterSettings(
            db_path=tmp_path / "stats.db",
            storage_path=tmp_path / "local-storage.json",
            dev_mode=True,
        )
        store = open_stats_store(settings, AppEnvironment("1.0.0", "test-os"))

        store.record_launch_stats({"mainReadyTime": 1, "loadTime": 2, "rendererReadyTime": 3})
        assert store.record_commit() == 1
        assert store.report() == "disabled"

        snapshot = store.get_daily_snapshot()
        assert snapshot.report.commits == 1
        assert snapshot.launch_count == 1
        assert (tmp_path / "stats.db").exists()
        store.transport.close()
