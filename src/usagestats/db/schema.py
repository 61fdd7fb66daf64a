"""Database schema for usagestats.

Two tables back the daily report:
1. launches - one row per application launch, cleared after a successful report
2. daily_dimensions - single running row of counters for the current period
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Float, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class LaunchRecord(Base):
    """Timings (milliseconds) captured for a single launch."""

    __tablename__ = "launches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    main_ready_time: Mapped[float] = mapped_column(Float, nullable=False)
    load_time: Mapped[float] = mapped_column(Float, nullable=False)
    renderer_ready_time: Mapped[float] = mapped_column(Float, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )


class DailyCounters(Base):
    """Cumulative counters for the current reporting period.

    Invariant: at most one row is in use. Readers take the lowest id.
    """

    __tablename__ = "daily_dimensions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    commits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Epoch milliseconds; null until the first period boundary is recorded
    period_start: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
