"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping aggregation logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from usagestats.db.schema import DailyCounters, LaunchRecord
from usagestats.models.domain import DailyCountersEntity, LaunchEntity
from usagestats.models.types import LaunchStats

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _launch_to_entity(launch: LaunchRecord) -> LaunchEntity:
    """Convert SQLAlchemy LaunchRecord to domain entity."""
    return LaunchEntity(
        id=launch.id,
        main_ready_time=launch.main_ready_time,
        load_time=launch.load_time,
        renderer_ready_time=launch.renderer_ready_time,
    )


def _counters_to_entity(counters: DailyCounters) -> DailyCountersEntity:
    """Convert SQLAlchemy DailyCounters to domain entity."""
    return DailyCountersEntity(
        id=counters.id,
        commits=counters.commits,
        period_start=counters.period_start,
    )


# ============================================================================
# Launch Repository
# ============================================================================


def add_launch(session: DbSession, stats: LaunchStats) -> None:
    """Append a launch record."""
    session.add(
        LaunchRecord(
            main_ready_time=stats.main_ready_time,
            load_time=stats.load_time,
            renderer_ready_time=stats.renderer_ready_time,
        )
    )


def get_launches(session: DbSession) -> list[LaunchEntity]:
    """Get all launch records in insertion order."""
    launches = session.scalars(select(LaunchRecord).order_by(LaunchRecord.id)).all()
    return [_launch_to_entity(launch) for launch in launches]


def count_launches(session: DbSession) -> int:
    """Get number of stored launch records."""
    return session.scalar(select(func.count()).select_from(LaunchRecord)) or 0


def delete_launches(session: DbSession, launch_ids: Iterable[int]) -> int:
    """Delete the given launch records.

    Returns:
        Number of rows deleted.
    """
    ids = list(launch_ids)
    if not ids:
        return 0
    result = session.execute(delete(LaunchRecord).where(LaunchRecord.id.in_(ids)))
    return result.rowcount


def clear_launches(session: DbSession) -> int:
    """Delete every launch record."""
    result = session.execute(delete(LaunchRecord))
    return result.rowcount


# ============================================================================
# Daily Counters Repository
# ============================================================================


def get_daily_counters(
    session: DbSession, *, for_update: bool = False
) -> DailyCountersEntity | None:
    """Get the daily counters row, or None if nothing was recorded yet.

    Args:
        session: Database session.
        for_update: Lock the row for the rest of the transaction where the
            backend supports it (SQLite ignores this).
    """
    stmt = select(DailyCounters).order_by(DailyCounters.id).limit(1)
    if for_update:
        stmt = stmt.with_for_update()
    counters = session.scalars(stmt).first()
    return _counters_to_entity(counters) if counters else None


def upsert_daily_counters(
    session: DbSession,
    counters_id: int | None,
    *,
    commits: int,
    period_start: int | None = None,
) -> DailyCountersEntity:
    """Write the daily counters row.

    Updates in place when counters_id identifies an existing row,
    otherwise inserts a new row.
    """
    counters = session.get(DailyCounters, counters_id) if counters_id is not None else None
    if counters is None:
        counters = DailyCounters(commits=commits, period_start=period_start)
        session.add(counters)
    else:
        counters.commits = commits
        if period_start is not None:
            counters.period_start = period_start
    session.flush()
    return _counters_to_entity(counters)
