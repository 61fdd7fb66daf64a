"""Reporter configuration.

Defaults live here as module constants; deployments override them through
USAGESTATS_* environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from usagestats.db.session import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

# How often daily stats may be submitted (24 hours, in milliseconds)
REPORT_INTERVAL_MS = 1000 * 60 * 60 * 24

DEFAULT_ENDPOINT = "https://stats.example.com/api/usage/desktop"

# Storage key holding the epoch-ms time of the last successful report
LAST_REPORT_KEY = "last-daily-stats-report"

DEFAULT_STORAGE_PATH = Path.home() / ".usagestats" / "local-storage.json"

DEFAULT_TIMEOUT_SECONDS = 10.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUTHY


def is_dev_mode(environ: Mapping[str, str] | None = None) -> bool:
    """Whether this is a development or test run.

    Stats are never reported from such runs.
    """
    if environ is None:
        environ = os.environ
    return _env_flag(environ, "USAGESTATS_DEV") or _env_flag(environ, "USAGESTATS_TEST_ENV")


@dataclass
class ReporterSettings:
    """Settings for wiring a StatsStore."""

    endpoint: str = DEFAULT_ENDPOINT
    dev_mode: bool = False
    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    storage_path: Path = field(default_factory=lambda: DEFAULT_STORAGE_PATH)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    reset_counters_on_report: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ReporterSettings:
        """Build settings from USAGESTATS_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.
        """
        if environ is None:
            environ = os.environ

        timeout = DEFAULT_TIMEOUT_SECONDS
        raw_timeout = environ.get("USAGESTATS_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid USAGESTATS_TIMEOUT: {raw_timeout!r}")
            else:
                if timeout <= 0:
                    logger.warning(f"Ignoring non-positive USAGESTATS_TIMEOUT: {raw_timeout!r}")
                    timeout = DEFAULT_TIMEOUT_SECONDS

        return cls(
            endpoint=environ.get("USAGESTATS_ENDPOINT") or DEFAULT_ENDPOINT,
            dev_mode=is_dev_mode(environ),
            db_path=Path(environ.get("USAGESTATS_DB_PATH") or DEFAULT_DB_PATH),
            storage_path=Path(environ.get("USAGESTATS_STORAGE_PATH") or DEFAULT_STORAGE_PATH),
            timeout_seconds=timeout,
            reset_counters_on_report=_env_flag(environ, "USAGESTATS_RESET_COUNTERS"),
        )
