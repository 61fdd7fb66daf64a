"""Database session management.

Provides the session factory for the local SQLite stats database. The
reporter and the commit/launch recording paths may run on different threads,
so a single shared connection is used with thread checks disabled.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from usagestats.db.schema import Base

# Default database path
DEFAULT_DB_PATH = Path.home() / ".usagestats" / "stats.db"

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path. Subsequent calls with the same
    path return the cached engine.

    Args:
        db_path: Path to SQLite database file. Defaults to ~/.usagestats/stats.db.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    # Create parent directories only when creating a new engine
    db_path.parent.mkdir(parents=True, exist_ok=True)

    # - check_same_thread=False: timer and UI callers share the connection
    # - StaticPool: single connection, writes serialized by the store lock
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _engine_cache[cache_key] = engine

    return engine


def get_session_factory(db_path: Path | None = None) -> sessionmaker:
    """Get cached session factory for the database.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        Cached sessionmaker instance.
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _session_factory_cache:
        return _session_factory_cache[cache_key]

    engine = get_engine(db_path)
    factory = sessionmaker(bind=engine)
    _session_factory_cache[cache_key] = factory

    return factory


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Run one transaction on a session from the given factory.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Example:
        with session_scope(factory) as session:
            repo.add_launch(session, stats)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Path | None = None) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.

    Args:
        db_path: Path to SQLite database file.
    """
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
