"""Shared pytest fixtures for usagestats tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from usagestats.core.environment import AppEnvironment
from usagestats.db.schema import Base
from usagestats.errors import TransportError
from usagestats.models.types import HttpRequest
from usagestats.reporter.stats_store import StatsStore
from usagestats.storage.base import MemoryStorage
from usagestats.transport.base import TransportBase


class RecordingTransport(TransportBase):
    """Transport that records requests and optionally fails them."""

    def __init__(self, fail: bool = False):
        self.requests: list[HttpRequest] = []
        self.fail = fail

    def send(self, request: HttpRequest) -> None:
        self.requests.append(request)
        if self.fail:
            raise TransportError("connection refused")


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test engine."""
    return sessionmaker(bind=engine)


@pytest.fixture
def session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage():
    """Empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def transport():
    """Transport that accepts every request."""
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    """Transport that rejects every request."""
    return RecordingTransport(fail=True)


@pytest.fixture
def environment():
    """Fixed version strings for reports."""
    return AppEnvironment(app_version="1.2.3", os_version="22.6.0")


@pytest.fixture
def make_store(session_factory, storage, transport, environment):
    """Build a StatsStore over the test database.

    Keyword arguments override the default collaborators.
    """

    def _make(**kwargs) -> StatsStore:
        options = {
            "session_factory": session_factory,
            "storage": storage,
            "transport": transport,
            "environment": environment,
            "endpoint": "https://stats.test/api/usage",
        }
        options.update(kwargs)
        return StatsStore(**options)

    return _make
