"""Domain models for usagestats.

Pure Python dataclasses representing stored records.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LaunchEntity:
    """Domain model for one launch's timings (milliseconds)."""

    id: int
    main_ready_time: float
    load_time: float
    renderer_ready_time: float


@dataclass
class DailyCountersEntity:
    """Domain model for the running daily counters row."""

    id: int
    commits: int
    period_start: int | None = None
