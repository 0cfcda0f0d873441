"""Database layer — engine, session, ORM base, bot store."""

from bot_state.db.base import Base
from bot_state.db.engine import create_db_engine, create_tables, get_sessionmaker, init_engine
from bot_state.db.store import BotStore, MemoryBotStore, SqlBotStore

__all__ = [
    "Base",
    "BotStore",
    "MemoryBotStore",
    "SqlBotStore",
    "create_db_engine",
    "create_tables",
    "get_sessionmaker",
    "init_engine",
]
