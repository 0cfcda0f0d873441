"""Import all table modules so Base.metadata knows about them."""

from bot_state.db.tables.bots import SCHEMA, BotRow, SignalRow

__all__ = ["SCHEMA", "BotRow", "SignalRow"]
