"""Host environment lookups attached to every daily report.

The version and OS strings are supplied by the running application;
these helpers provide the defaults used when the host does not pass its own.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "usagestats"
UNKNOWN_VERSION = "0.0.0"


@dataclass(frozen=True)
class AppEnvironment:
    """Version strings reported alongside the aggregated stats."""

    app_version: str
    os_version: str


def get_app_version(distribution: str = DISTRIBUTION_NAME) -> str:
    """Get the installed version of the given distribution.

    Returns UNKNOWN_VERSION when running from a source tree that was
    never installed.
    """
    try:
        return version(distribution)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


def get_os_version() -> str:
    """Get the OS kernel release string (e.g. '6.5.0-14-generic')."""
    return platform.release()


def current_environment(app_version: str | None = None) -> AppEnvironment:
    """Build an AppEnvironment for this process."""
    return AppEnvironment(
        app_version=app_version or get_app_version(),
        os_version=get_os_version(),
    )
