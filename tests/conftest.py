"""Shared test fixtures."""

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bot_state.db.engine import create_db_engine, create_tables
from bot_state.db.store import MemoryBotStore, SqlBotStore
from bot_state.engine import BotEngine, BotRegistry
from bot_state.policy import ResolutionPolicy


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 5_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return BotEngine(ResolutionPolicy(), clock=clock)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads, tables created.

    The bot_state schema is translated away by create_db_engine on SQLite.
    """
    eng = create_db_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sql_store(session_factory):
    return SqlBotStore(session_factory)


@pytest.fixture
def memory_registry(engine):
    return BotRegistry(engine, MemoryBotStore())


@pytest.fixture
def sql_registry(engine, sql_store):
    return BotRegistry(engine, sql_store)
