"""Stats store: records usage and reports it once per interval.

Owns the reporting decision and every post-submission state change:
- Gates submission on the persisted last-report timestamp
- Asks the aggregator for a snapshot and hands it to the transport
- On success deletes the reported launches, then advances the timestamp
- On failure leaves all state untouched so the next cycle retries

Submission always completes before any state is mutated. A crash between a
successful submission and persisting the new timestamp can cause one
duplicate report, never lost data: reports go out at most once per interval
under normal operation, not exactly once.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from typing import Any, Callable, Mapping

from sqlalchemy.orm import sessionmaker

from usagestats.aggregation.daily import DailySnapshot, build_snapshot
from usagestats.core.environment import AppEnvironment, current_environment
from usagestats.core.settings import (
    DEFAULT_ENDPOINT,
    LAST_REPORT_KEY,
    REPORT_INTERVAL_MS,
    ReporterSettings,
)
from usagestats.db import repo
from usagestats.db.session import get_session_factory, init_db, session_scope
from usagestats.errors import TransportError
from usagestats.models.types import HttpRequest, LaunchStats, ReportStatus
from usagestats.storage.base import KeyValueStorage
from usagestats.storage.file import JsonFileStorage
from usagestats.transport.base import TransportBase
from usagestats.transport.http import HttpxTransport

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(r"-?[0-9]+")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_timestamp(value: str | None) -> int:
    """Parse a persisted epoch-ms timestamp.

    Absent, empty, or non-numeric values mean no report was ever made (0).
    """
    if value is None or not value.strip():
        return 0
    # ASCII digits only; int() alone would also take "1_700" and non-ASCII digits
    if not _TIMESTAMP_RE.fullmatch(value.strip()):
        logger.debug(f"Ignoring corrupt last report timestamp: {value!r}")
        return 0
    return int(value.strip())


class StatsStore:
    """Records launch stats and commits, and reports them daily.

    All database access is serialized through one lock, so the commit
    counter's read-increment-write never loses an update and a report's
    snapshot read never interleaves with its cleanup.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        storage: KeyValueStorage,
        transport: TransportBase,
        environment: AppEnvironment | None = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        dev_mode: bool = False,
        reset_counters_on_report: bool = False,
        clock: Callable[[], int] | None = None,
    ):
        """Initialize stats store.

        Args:
            session_factory: Factory for sessions on the stats database.
            storage: Key-value storage holding the last report timestamp.
            transport: Delivers the report to the collection endpoint.
            environment: Version strings for reports. Defaults to this process.
            endpoint: Collection endpoint URL.
            dev_mode: Development/test run; report() never does anything.
            reset_counters_on_report: Start a new counters period after each
                successful report instead of accumulating indefinitely.
            clock: Returns the current time in epoch ms. Defaults to now_ms.
        """
        self.session_factory = session_factory
        self.storage = storage
        self.transport = transport
        self.environment = environment or current_environment()
        self.endpoint = endpoint
        self.dev_mode = dev_mode
        self.reset_counters_on_report = reset_counters_on_report
        self._clock = clock or now_ms
        self._store_lock = threading.RLock()
        self._report_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @staticmethod
    def should_report(now: int, last_report_timestamp: int | None) -> bool:
        """Whether a report is due at now, given the last successful report."""
        return now - (last_report_timestamp or 0) > REPORT_INTERVAL_MS

    def last_report_timestamp(self) -> int:
        """Get the epoch-ms time of the last successful report, 0 if none."""
        return parse_timestamp(self.storage.get_item(LAST_REPORT_KEY))

    def report(self, now: int | None = None) -> ReportStatus:
        """Report the daily stats if a report is due.

        Transport failures are logged, not raised.

        Args:
            now: Current time in epoch ms. Defaults to the store's clock.

        Returns:
            "disabled" in dev mode, "not_due" inside the interval,
            "submitted" on success, "failed" if the transport failed.
        """
        # Never report stats while in dev or test
        if self.dev_mode:
            return "disabled"

        if now is None:
            now = self._clock()

        with self._report_lock:
            last = self.last_report_timestamp()
            if not self.should_report(now, last):
                logger.debug(f"Daily stats not due (last report at {last})")
                return "not_due"

            snapshot = self.get_daily_snapshot()
            request = HttpRequest(
                url=self.endpoint,
                method="POST",
                headers={"Content-Type": "application/json"},
                body=snapshot.report.to_payload(),
            )

            try:
                self.transport.send(request)
            except TransportError as e:
                logger.warning(f"Error reporting stats: {e}")
                return "failed"

            logger.info(
                f"Stats reported ({snapshot.launch_count} launches, "
                f"{snapshot.report.commits} commits)"
            )

            self._start_new_period(snapshot, now)
            self.storage.set_item(LAST_REPORT_KEY, str(now))
            return "submitted"

    def get_daily_snapshot(self) -> DailySnapshot:
        """Build the report that would be submitted now, without side effects."""
        with self._store_lock, session_scope(self.session_factory) as session:
            return build_snapshot(session, self.environment)

    def _start_new_period(self, snapshot: DailySnapshot, now: int) -> None:
        """Drop the reported launches and, if configured, reset counters.

        Launches recorded after the snapshot was taken are kept for the
        next report. Likewise a counter reset subtracts only what was
        reported.
        """
        with self._store_lock, session_scope(self.session_factory) as session:
            deleted = repo.delete_launches(session, snapshot.launch_ids)
            logger.debug(f"Cleared {deleted} reported launch records")

            if self.reset_counters_on_report:
                counters = repo.get_daily_counters(session, for_update=True)
                remaining = counters.commits - snapshot.report.commits if counters else 0
                repo.upsert_daily_counters(
                    session,
                    counters.id if counters else None,
                    commits=max(0, remaining),
                    period_start=now,
                )

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_launch_stats(self, stats: LaunchStats | Mapping[str, Any]) -> None:
        """Record the timings of one launch.

        Raises:
            pydantic.ValidationError: If a timing is missing, negative or not finite.
        """
        if not isinstance(stats, LaunchStats):
            stats = LaunchStats.model_validate(stats)
        with self._store_lock, session_scope(self.session_factory) as session:
            repo.add_launch(session, stats)

    def record_commit(self) -> int:
        """Record that a commit was accomplished.

        Returns:
            The commit count for the current period after incrementing.
        """
        with self._store_lock, session_scope(self.session_factory) as session:
            counters = repo.get_daily_counters(session, for_update=True)
            commits = counters.commits + 1 if counters else 1
            repo.upsert_daily_counters(
                session, counters.id if counters else None, commits=commits
            )
        return commits


def open_stats_store(
    settings: ReporterSettings | None = None,
    environment: AppEnvironment | None = None,
) -> StatsStore:
    """Create a StatsStore backed by the configured database and files.

    Args:
        settings: Reporter settings. Defaults to ReporterSettings.from_env().
        environment: Version strings for reports. Defaults to this process.
    """
    if settings is None:
        settings = ReporterSettings.from_env()

    init_db(settings.db_path)

    return StatsStore(
        session_factory=get_session_factory(settings.db_path),
        storage=JsonFileStorage(settings.storage_path),
        transport=HttpxTransport(timeout=settings.timeout_seconds),
        environment=environment,
        endpoint=settings.endpoint,
        dev_mode=settings.dev_mode,
        reset_counters_on_report=settings.reset_counters_on_report,
    )
