"""Database engine and session management."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from bot_state.db.base import Base
from bot_state.db.tables import SCHEMA

_SessionLocal: sessionmaker[Session] | None = None


def _ensure_psycopg_driver(url: str) -> str:
    """Rewrite postgresql:// to postgresql+psycopg:// for psycopg v3."""
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create an engine; on SQLite the bot_state schema maps to the main database."""
    url = _ensure_psycopg_driver(url)
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        engine = engine.execution_options(schema_translate_map={SCHEMA: None})
    return engine


def create_tables(engine: Engine) -> None:
    """Create the schema (where supported) and all tables if missing."""
    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
    Base.metadata.create_all(engine)


def init_engine(url: str, **kwargs) -> Engine:
    """Create the engine and the global session factory bound to it."""
    global _SessionLocal
    engine = create_db_engine(url, **kwargs)
    _SessionLocal = sessionmaker(bind=engine)
    return engine


def get_sessionmaker() -> sessionmaker[Session]:
    if _SessionLocal is None:
        raise RuntimeError("Database engine not initialised, call init_engine() first")
    return _SessionLocal
