"""Daily report aggregation.

Averages per-launch timings and passes daily counters through.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from usagestats.core.environment import AppEnvironment
from usagestats.db import repo
from usagestats.db.repo import DbSession
from usagestats.models.domain import LaunchEntity
from usagestats.models.types import DailyReport, LaunchStats


@dataclass(frozen=True)
class DailySnapshot:
    """A report together with the store state it was built from.

    launch_ids is exactly the set of launch records averaged into report;
    the reporter deletes only these after a successful submission.
    """

    report: DailyReport
    launch_ids: tuple[int, ...]
    counters_id: int | None

    @property
    def launch_count(self) -> int:
        return len(self.launch_ids)


def average_launch_stats(launches: list[LaunchEntity]) -> LaunchStats:
    """Compute the arithmetic mean of each timing field.

    An empty launch set averages to zero for every field, so a day with
    no launches still reports its counters.

    Args:
        launches: Launch records to average.

    Returns:
        LaunchStats holding the per-field means.
    """
    if not launches:
        return LaunchStats(main_ready_time=0.0, load_time=0.0, renderer_ready_time=0.0)

    # rows: launches, columns: main_ready, load, renderer_ready
    timings = np.array(
        [
            [launch.main_ready_time, launch.load_time, launch.renderer_ready_time]
            for launch in launches
        ],
        dtype=np.float64,
    )
    means = timings.mean(axis=0)

    return LaunchStats(
        main_ready_time=float(means[0]),
        load_time=float(means[1]),
        renderer_ready_time=float(means[2]),
    )


def build_snapshot(session: DbSession, environment: AppEnvironment) -> DailySnapshot:
    """Build the daily report from the current store contents.

    Args:
        session: Database session. Only read from.
        environment: Version strings to attach to the report.

    Returns:
        DailySnapshot with the report and the launch ids it covers.
    """
    launches = repo.get_launches(session)
    counters = repo.get_daily_counters(session)

    averages = average_launch_stats(launches)

    report = DailyReport(
        app_version=environment.app_version,
        os_version=environment.os_version,
        main_ready_time=averages.main_ready_time,
        load_time=averages.load_time,
        renderer_ready_time=averages.renderer_ready_time,
        commits=counters.commits if counters else 0,
    )

    return DailySnapshot(
        report=report,
        launch_ids=tuple(launch.id for launch in launches),
        counters_id=counters.id if counters else None,
    )
